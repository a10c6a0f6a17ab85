"""
LLM prompt templates and response schema for table extraction.

Contains:
- Image prompt (screenshots of financial reports)
- Raw text prompt (numbers or CSV-like text pasted by the user)
- JSON response schema shared by all providers
"""

from typing import Optional

IMAGE_PROMPT = (
    "Analyze these images of financial reports or data tables. Identify ALL distinct tables found. \n\n"
    "CRITICAL INSTRUCTION: The images may contain multiple separate tables (e.g. Table 1 followed by "
    "Table 2). You MUST extract them as separate items in the 'tables' list. Do not merge unrelated "
    "tables into one. Look for visual separators, different titles, or different column headers to "
    "distinguish tables.\n\n"
    "For each table:\n"
    "1. Extract the specific title text appearing above the table (e.g. '2. Goodwill Impairment').\n"
    "2. Identify headers accurately.\n"
    "3. Extract all rows, ensuring values align with headers.\n\n"
    "Support Chinese characters and other languages accurately. Maintain the original text content."
)

INSTRUCTIONS_APPENDIX = (
    "\n\nIMPORTANT USER INSTRUCTIONS: The user has provided specific requirements for what to "
    'extract: "{instructions}". Follow these instructions strictly when selecting which data to '
    "extract or ignore."
)

RAW_TEXT_PROMPT = (
    "Analyze the following RAW TEXT DATA provided by the user. Your task is to interpret this "
    "unstructured data and format it into a clean, structured JSON table.\n\n"
    'RAW DATA:\n"{raw_text}"\n\n'
    "PROCESSING RULES:\n"
    "1. **Delimiters**: The user may have pasted numbers or text separated by spaces, newlines, "
    "commas (,), or Chinese commas (，). Treat these as delimiters.\n"
    "2. **Table Structure**: If it is a simple list of numbers, create a single-column or single-row "
    'table as appropriate, with a generic header like "Value" or "Amount". If it looks like a matrix '
    "(CSV-like), structure it with appropriate headers.\n"
    "3. **No Modification**: Do not round or alter the numerical values (keep decimals exactly as "
    "they are).\n"
    '4. **Negative Numbers**: Interpret numbers enclosed in parentheses like "(123.45)" or "(1,000)" '
    "as negative numbers (e.g., -123.45).\n"
    '5. **Title**: If no clear title exists in the text, use "Processed Raw Data" as the title.\n'
)

# Appended for providers that cannot enforce a response schema
JSON_FORMAT_INSTRUCTIONS = '''

Respond with ONLY a JSON object of this exact shape, no commentary:
{
  "tables": [
    {
      "title": "table title",
      "summary": "one-sentence summary of the table",
      "headers": ["Column A", "Column B"],
      "rows": [
        {"values": ["cell for Column A", "cell for Column B"]}
      ]
    }
  ]
}
Row values MUST follow the order of the headers exactly. Use empty strings for missing data.'''

TABLE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {
            "type": "STRING",
            "description": (
                "The distinct title of this specific table (e.g., 'Balance Sheet', 'Processed Data'). "
                "Look for text immediately preceding the grid."
            ),
        },
        "summary": {
            "type": "STRING",
            "description": "A very short one-sentence summary of what this specific table represents.",
        },
        "headers": {
            "type": "ARRAY",
            "description": "The column headers found in this table.",
            "items": {"type": "STRING"},
        },
        "rows": {
            "type": "ARRAY",
            "description": "The data rows for this table.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "values": {
                        "type": "ARRAY",
                        "description": (
                            "The cell values for this row. The order MUST match the headers array "
                            "exactly. Use empty strings for missing data."
                        ),
                        "items": {"type": "STRING"},
                    },
                },
                "required": ["values"],
            },
        },
    },
    "required": ["headers", "rows"],
}

DATA_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "tables": {
            "type": "ARRAY",
            "description": (
                "A list of ALL distinct tables found. CRITICAL: If there are multiple distinct grids "
                "or unrelated data sets, create a separate entry for EACH table. Do not merge them."
            ),
            "items": TABLE_SCHEMA,
        },
    },
    "required": ["tables"],
}


def get_image_prompt(instructions: Optional[str] = None) -> str:
    """
    Get the prompt for extracting tables from images.

    Args:
        instructions: Optional user instructions on what to extract

    Returns:
        Formatted prompt string
    """
    prompt = IMAGE_PROMPT
    if instructions and instructions.strip():
        prompt += INSTRUCTIONS_APPENDIX.format(instructions=instructions)
    return prompt


def get_raw_text_prompt(raw_text: str) -> str:
    """Get the prompt for structuring pasted text into a table."""
    return RAW_TEXT_PROMPT.format(raw_text=raw_text)


def build_prompt(has_images: bool, instructions: Optional[str] = None) -> str:
    """
    Pick the prompt for a request.

    With images, the instructions steer what to extract. Without images,
    the instructions are the raw data itself.
    """
    if has_images:
        return get_image_prompt(instructions)
    return get_raw_text_prompt(instructions or "")
