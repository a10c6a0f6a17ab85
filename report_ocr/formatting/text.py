"""Title casing for headers and non-numeric cell text."""

from report_ocr.models.options import ProcessingOptions

# Function words kept lowercase unless they start the string
MINOR_WORDS = frozenset(
    {"of", "and", "in", "on", "at", "to", "for", "by", "with", "a", "an", "the", "or", "nor"}
)


def to_title_case(text: str) -> str:
    """
    Title-case a string, normalizing ALL CAPS input.

    Every word is capitalized with the remainder lowercased, except
    minor words after the first position. Words are split on single
    spaces, so repeated spaces and punctuation pass through as-is.
    """
    words = []
    for index, word in enumerate(text.split(" ")):
        lower = word.lower()
        if index > 0 and lower in MINOR_WORDS:
            words.append(lower)
        else:
            words.append(word[:1].upper() + word[1:].lower())
    return " ".join(words)


def apply_text_case(text: str, options: ProcessingOptions) -> str:
    if options.title_case:
        return to_title_case(text)
    return text


def format_header(header: str, options: ProcessingOptions) -> str:
    """Display form of a column header."""
    return apply_text_case(header, options)
