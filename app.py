"""
Streamlit entry point — Marketplace Column Mapper UI.

Wires the mapping pipeline into a 4-step user flow:
  1. File upload (marketplace template CSV + seller product CSV)
  2. Column mapping (selectors pre-filled with the automatic defaults)
  3. Save checks (required attributes block, optional ones need confirmation)
  4. Downloads (saved mapping as JSON, transformed product data as CSV)

Contains NO business logic — only calls processing modules and displays results.
"""

import json
import logging

import streamlit as st

from processing.column_mapper import auto_map
from processing.file_reader import (
    format_file_size,
    read_seller_file,
    read_template_file,
    validate_upload,
)
from processing.mapping_validator import (
    summarize_mapping,
    to_persisted_mapping,
    validate_mapping,
)
from processing.quality_checker import check_quality
from processing.transformer import apply_mapping
from utils.fuzzy_match import rank_candidates

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Page configuration
# ═══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="Marketplace Column Mapper",
    page_icon="🔗",
    layout="wide",
)


# ═══════════════════════════════════════════════════════════════════════════
# Session state initialisation
# ═══════════════════════════════════════════════════════════════════════════

def _init_session_state() -> None:
    """Ensure all required session state keys exist with sensible defaults."""
    defaults: dict = {
        "assignment": {},
        "pairing_key": None,
        "seller_key": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


_init_session_state()

st.title("🔗 Marketplace Column Mapper")
st.caption("Map the columns of a seller product file to a marketplace template.")


# ═══════════════════════════════════════════════════════════════════════════
# Section 1: File Upload
# ═══════════════════════════════════════════════════════════════════════════

st.header("📁 Upload Files")

upload_col1, upload_col2 = st.columns(2)

with upload_col1:
    template_upload = st.file_uploader(
        "Marketplace template",
        type=["csv"],
        help="One row per attribute: attribute_name, data_type, required, ...",
    )

with upload_col2:
    seller_upload = st.file_uploader(
        "Seller product file",
        type=["csv"],
        help="Header row followed by product rows.",
    )

if not template_upload or not seller_upload:
    st.info("Upload both files to start mapping.")
    st.stop()

upload_errors = [
    error
    for error in (
        validate_upload(template_upload.name, template_upload.size),
        validate_upload(seller_upload.name, seller_upload.size),
    )
    if error
]
if upload_errors:
    for error in upload_errors:
        st.error(error)
    st.stop()

template_result = read_template_file(template_upload)
seller_result = read_seller_file(seller_upload)

for error in template_result.errors + seller_result.errors:
    st.error(error)
if template_result.errors or seller_result.errors:
    st.stop()

attributes = template_result.attributes
columns = seller_result.columns

st.caption(
    f"{seller_upload.name} — {format_file_size(seller_upload.size)}, "
    f"{seller_result.row_count} rows, {len(columns)} columns"
)


# ═══════════════════════════════════════════════════════════════════════════
# Section 2: Column Mapping
# ═══════════════════════════════════════════════════════════════════════════

# A new seller file clears the selection; any new pairing runs the default
# pass once, filling only empty entries.
seller_key = (seller_upload.name, seller_upload.size)
pairing_key = (template_upload.name, template_upload.size) + seller_key

if seller_key != st.session_state["seller_key"]:
    st.session_state["seller_key"] = seller_key
    st.session_state["assignment"] = {}

if pairing_key != st.session_state["pairing_key"]:
    st.session_state["pairing_key"] = pairing_key
    st.session_state["assignment"] = auto_map(
        [attribute.as_target_field() for attribute in attributes],
        columns,
        st.session_state["assignment"],
    )

st.divider()
st.header("🧩 Step 1: Map Columns")

column_names = [column.name for column in columns]
samples = {column.name: ", ".join(column.sample_values) for column in columns}
current = st.session_state["assignment"]
edited: dict[str, str] = {}

for idx, attribute in enumerate(attributes):
    row_cols = st.columns([2, 3])

    label = f"**{attribute.name}**" + (" :red[*]" if attribute.required else "")
    details = f"Type: {attribute.type}"
    if attribute.max_length:
        details += f" | Max: {attribute.max_length}"
    row_cols[0].markdown(label)
    row_cols[0].caption(details)

    options = [""] + column_names
    selected = current.get(attribute.name, "")
    edited[attribute.name] = row_cols[1].selectbox(
        attribute.name,
        options=options,
        index=options.index(selected) if selected in options else 0,
        format_func=lambda name: (
            f"{name}  ({samples[name]})" if name and samples[name]
            else name or "Select column..."
        ),
        key=f"map_{hash(pairing_key)}_{idx}",
        label_visibility="collapsed",
    )

    if not edited[attribute.name]:
        suggestions = rank_candidates(attribute.name, column_names, limit=3)
        if suggestions:
            row_cols[1].caption(
                "Closest: " + ", ".join(name for name, _ in suggestions)
            )

st.session_state["assignment"] = edited

summary = summarize_mapping(attributes, edited)
metric_cols = st.columns(2)
metric_cols[0].metric("Mapped", f"{summary.mapped} of {summary.total}")
metric_cols[1].metric(
    "Required mapped",
    f"{summary.required_mapped} of {summary.required_total}",
)


# ═══════════════════════════════════════════════════════════════════════════
# Section 3: Save checks
# ═══════════════════════════════════════════════════════════════════════════

st.divider()
st.header("💾 Step 2: Save Mapping")

validation = validate_mapping(attributes, edited)

if validation.missing_required:
    st.error(
        "Please map all required fields: "
        + ", ".join(validation.missing_required)
    )

for column, names in validation.shared_columns.items():
    st.error(
        f"'{column}' is selected for several attributes: {', '.join(names)}. "
        f"Each seller column can be mapped to one attribute only."
    )

if not validation.can_save:
    st.stop()

if validation.needs_confirmation:
    confirmed = st.checkbox(
        f"Save without mapping {len(validation.unmapped_optional)} optional "
        f"attribute(s): {', '.join(validation.unmapped_optional)}"
    )
    if not confirmed:
        st.stop()


# ═══════════════════════════════════════════════════════════════════════════
# Section 4: Downloads
# ═══════════════════════════════════════════════════════════════════════════

persisted = to_persisted_mapping(edited)
transformed = apply_mapping(seller_result.dataframe, persisted, attributes)
report = check_quality(transformed, attributes)

download_col1, download_col2 = st.columns(2)
download_col1.download_button(
    "⬇️ Download mapping (JSON)",
    data=json.dumps(persisted, indent=2, ensure_ascii=False),
    file_name="column_mapping.json",
    mime="application/json",
    use_container_width=True,
)
download_col2.download_button(
    "⬇️ Download transformed data (CSV)",
    data=transformed.to_csv(index=False),
    file_name=f"mapped_{seller_upload.name}",
    mime="text/csv",
    use_container_width=True,
)

if report.is_clean:
    st.success(f"All {report.total_rows} rows pass the template checks.")
else:
    with st.expander("⚠️ Data quality issues"):
        for title, issues in [
            ("Missing required values", report.missing_required),
            ("Not a number", report.invalid_numerics),
            ("Below minimum", report.below_minimum),
            ("Too long", report.too_long),
            ("Not an allowed value", report.invalid_values),
            ("Not a boolean", report.invalid_booleans),
        ]:
            if issues:
                st.markdown(f"**{title}** ({len(issues)})")
                st.dataframe(issues, use_container_width=True)

st.dataframe(transformed.head(20), use_container_width=True)
