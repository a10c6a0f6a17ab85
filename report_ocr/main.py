"""
Report OCR - Main Streamlit UI

Extracts tables from screenshots of financial reports (or from pasted
raw text) with a vision LLM, then formats them for copy and export.

Features:
- Multi-image upload
- Raw text mode when no images are given
- Unit conversion, forced negatives, decimal control, title casing
- Table and list views with per-cell selection
- Tab-separated copy text and Excel download
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from report_ocr.config import MULTIPLIER_PRESETS, LLMProvider, get_config, validate_system_requirements
from report_ocr.export.clipboard import copy_selected, copy_table_text
from report_ocr.export.excel import ExcelExporter
from report_ocr.formatting.table import format_table
from report_ocr.llm.client import LLMClient
from report_ocr.llm.errors import LLMClientError
from report_ocr.models.options import Precision, ProcessingOptions
from report_ocr.models.table import CellId, TableData, ViewMode
from report_ocr.selection import TableSelection

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def init_session_state():
    """Initialize Streamlit session state."""
    if "config" not in st.session_state:
        st.session_state.config = get_config()

    if "selection" not in st.session_state:
        st.session_state.selection = TableSelection()

    if "options" not in st.session_state:
        st.session_state.options = st.session_state.config.default_options

    if "extraction_error" not in st.session_state:
        st.session_state.extraction_error = None

    if "data_generation" not in st.session_state:
        st.session_state.data_generation = 0

    if "clipboard_text" not in st.session_state:
        st.session_state.clipboard_text = None

    if "system_validated" not in st.session_state:
        st.session_state.system_validated = False

    if "validation_results" not in st.session_state:
        st.session_state.validation_results = None


def validate_system():
    """Validate system requirements on startup."""
    if not st.session_state.system_validated:
        with st.spinner("Checking extraction providers..."):
            results = validate_system_requirements()
            st.session_state.validation_results = results
            st.session_state.system_validated = True

    return st.session_state.validation_results


def show_validation_status():
    """Display provider availability."""
    results = st.session_state.validation_results
    if not results:
        return

    available = []
    if results["gemini"]["configured"]:
        available.append("✅ Gemini (cloud)")
    if results["lm_studio"]["available"]:
        available.append("✅ LM Studio")

    if available:
        st.success(f"Available providers: {', '.join(available)}")
    else:
        st.warning(
            "⚠️ No extraction provider available. Set GEMINI_API_KEY or start an LM Studio server."
        )


def reset_results():
    """Drop stale results, e.g. after the uploaded images change."""
    st.session_state.selection.load(None)
    st.session_state.extraction_error = None
    st.session_state.clipboard_text = None
    st.session_state.data_generation += 1


def render_sidebar() -> ProcessingOptions:
    """Render the settings sidebar and return the current options snapshot."""
    config = st.session_state.config
    current: ProcessingOptions = st.session_state.options

    with st.sidebar:
        st.header("⚙️ Settings")

        provider_labels = {
            LLMProvider.GEMINI: "Gemini (cloud)",
            LLMProvider.LM_STUDIO: "LM Studio (local)",
        }
        config.llm_provider = st.selectbox(
            "Extraction Provider",
            options=list(provider_labels),
            format_func=provider_labels.get,
            index=list(provider_labels).index(config.llm_provider),
        )

        st.subheader("Number Formatting")

        preset_labels = {value: label for label, value in MULTIPLIER_PRESETS}
        preset_values = list(preset_labels)
        preset_index = preset_values.index(current.multiplier) if current.multiplier in preset_values else 0
        multiplier = st.selectbox(
            "Unit Conversion",
            options=preset_values,
            format_func=preset_labels.get,
            index=preset_index,
        )

        force_negative = st.checkbox(
            "Force Negative",
            value=current.force_negative,
            help="Show every non-zero number as negative",
        )
        title_case = st.checkbox(
            "Title Case Text",
            value=current.title_case,
            help="Capitalize headers and text cells (e.g. 'TOTAL REVENUE' → 'Total Revenue')",
        )
        keep_all = st.checkbox(
            "Keep All Decimals",
            value=current.decimal_places.keeps_all,
        )
        if keep_all:
            precision = Precision.full()
        else:
            places = st.number_input(
                "Decimal Places",
                min_value=0,
                max_value=20,
                value=current.decimal_places.places if current.decimal_places.places is not None else 2,
                step=1,
            )
            precision = Precision.fixed(int(places))

    options = ProcessingOptions(
        multiplier=multiplier,
        decimal_places=precision,
        custom_instruction=current.custom_instruction,
        force_negative=force_negative,
        title_case=title_case,
    )
    st.session_state.options = options
    return options


def render_upload_section() -> list:
    """Render image upload and instruction input; return uploaded image bytes."""
    config = st.session_state.config
    st.header("1. Upload Screenshots")

    uploaded_files = st.file_uploader(
        "Upload report screenshots",
        type=list(config.accepted_image_types),
        accept_multiple_files=True,
        key="uploader",
        help=f"Max size: {config.max_file_size_mb}MB per image",
    )

    images = []
    for uploaded in uploaded_files or []:
        content = uploaded.getvalue()
        if len(content) > config.max_file_size_mb * 1024 * 1024:
            st.error(f"{uploaded.name} exceeds {config.max_file_size_mb}MB and was skipped")
            continue
        images.append(content)

    signature = tuple(uploaded.name for uploaded in uploaded_files or [])
    if st.session_state.get("upload_signature") != signature:
        st.session_state.upload_signature = signature
        if st.session_state.selection.data is not None:
            reset_results()

    if images:
        st.image(images, width=160)

    st.header("2. Instructions or Raw Data")
    instruction = st.text_area(
        "Custom instructions",
        value=st.session_state.options.custom_instruction,
        placeholder=(
            "With images: describe what to extract (e.g. 'Only the 2023 column').\n"
            "Without images: paste numbers or CSV-like text to turn into a table."
        ),
        height=140,
    )
    st.session_state.options = st.session_state.options.with_changes(custom_instruction=instruction)

    return images


def perform_extraction(images: list):
    """Run the extraction call and store the result."""
    options: ProcessingOptions = st.session_state.options
    client = LLMClient(config=st.session_state.config)

    reset_results()
    try:
        with st.spinner("Extracting tables..."):
            data, provider = client.extract(images, options.custom_instruction)
    except (LLMClientError, OSError) as e:
        logger.exception("Extraction failed")
        st.session_state.extraction_error = str(e) or "An unexpected error occurred while processing."
        return

    st.session_state.selection.load(data)
    logger.info(f"Extracted {len(data)} tables with {provider.value}")


def render_table_tabs(selection: TableSelection):
    """Render the table switcher when more than one table was extracted."""
    data = selection.data
    if len(data) <= 1:
        return

    labels = [
        f"{table.display_title(index, len(data))} ({index + 1})"
        for index, table in enumerate(data.tables)
    ]
    chosen = st.radio(
        "Tables",
        options=list(range(len(labels))),
        format_func=lambda index: labels[index],
        index=selection.active_index,
        horizontal=True,
        key=f"table_tabs_{st.session_state.data_generation}",
        label_visibility="collapsed",
    )
    if chosen != selection.active_index:
        selection.select_table(chosen)
        st.session_state.clipboard_text = None


def cell_picker_key(selection: TableSelection) -> str:
    return f"cells_{st.session_state.data_generation}_{selection.active_index}"


def render_cell_picker(selection: TableSelection, table: TableData, options: ProcessingOptions):
    """Multi-select over cells, mirrored into the selection model."""
    formatted = format_table(table, options)
    cells = [
        CellId(row, column)
        for row in range(table.row_count)
        for column in range(table.column_count)
    ]

    def label(cell: CellId) -> str:
        marker = " ✓" if selection.is_copied(cell) else ""
        return f"R{cell.row + 1} · {formatted.headers[cell.column]}: {formatted.rows[cell.row][cell.column]}{marker}"

    chosen = st.multiselect(
        "Select cells",
        options=cells,
        default=selection.sorted_cells(),
        format_func=label,
        key=cell_picker_key(selection),
    )
    selection.set_selection(chosen)


def render_results(options: ProcessingOptions):
    """Render the extracted tables, selection and copy/export actions."""
    st.header("3. Extracted Data")
    selection: TableSelection = st.session_state.selection

    if st.session_state.extraction_error:
        st.error(st.session_state.extraction_error)

    if selection.data is None:
        st.info(
            "No data extracted yet. Upload screenshots of financial tables or paste numbers "
            "into the instructions box."
        )
        return

    table = selection.active_table
    if table is None:
        st.info("No tables found.")
        return

    render_table_tabs(selection)
    table = selection.active_table

    st.subheader(table.display_title(selection.active_index, len(selection.data)))
    if table.summary:
        st.caption(table.summary)

    view_mode = st.radio(
        "View",
        options=list(ViewMode),
        format_func=lambda mode: mode.name.title(),
        horizontal=True,
    )

    formatted = format_table(table, options)
    if view_mode == ViewMode.TABLE:
        df = pd.DataFrame(list(formatted.rows), columns=list(formatted.headers))
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        for index, record in enumerate(formatted.records()):
            with st.expander(f"Row {index + 1}", expanded=index < 3):
                for header, value in record.items():
                    st.markdown(f"**{header}:** {value}")

    render_cell_picker(selection, table, options)
    render_copy_actions(selection, table, options)


def render_copy_actions(selection: TableSelection, table: TableData, options: ProcessingOptions):
    """Copy buttons and downloads for the active table."""
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        if st.button("📋 Copy Table", use_container_width=True):
            st.session_state.clipboard_text = copy_table_text(table, options)

    with col2:
        count = len(selection.selected)
        if st.button(f"📋 Copy Selected ({count})", disabled=count == 0, use_container_width=True):
            st.session_state.clipboard_text = copy_selected(selection, options)
            if not selection.has_selection:
                # Multi-cell copy cleared the selection; reset the picker to match
                st.session_state.pop(cell_picker_key(selection), None)
                st.rerun()

    with col3:
        tsv = copy_table_text(table, options) or ""
        st.download_button(
            "⬇️ Download TSV",
            data=tsv.encode("utf-8"),
            file_name="table.tsv",
            mime="text/tab-separated-values",
            use_container_width=True,
        )

    with col4:
        try:
            workbook = ExcelExporter().to_bytes(selection.data, options)
        except ValueError as e:
            st.error(f"Export failed: {e}")
        else:
            st.download_button(
                "⬇️ Download Excel",
                data=workbook,
                file_name="extracted_tables.xlsx",
                mime=XLSX_MIME,
                use_container_width=True,
            )

    clipboard_text: Optional[str] = st.session_state.clipboard_text
    if clipboard_text is not None:
        st.caption("Use the copy icon to put this on your clipboard:")
        st.code(clipboard_text, language=None)


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="ReportOCR Pro",
        page_icon="📊",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Initialize
    init_session_state()

    # Header
    st.title("📊 ReportOCR Pro")
    st.markdown("AI-powered financial data extraction from report screenshots or pasted text.")

    # Validate providers on first load
    validate_system()
    show_validation_status()

    # Sidebar
    options = render_sidebar()

    st.divider()

    left, right = st.columns([1, 2])

    with left:
        images = render_upload_section()
        has_content = bool(images) or bool(st.session_state.options.custom_instruction.strip())
        if st.button("🔍 Extract Tables", type="primary", disabled=not has_content, use_container_width=True):
            perform_extraction(images)

    with right:
        render_results(options)


if __name__ == "__main__":
    main()
