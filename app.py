from typing import cast

import streamlit as st

from src.bom_summary import (
    DEFAULT_SORT,
    BomSummaryError,
    NoBomDataError,
    NoSupportedFilesError,
    ProcessedData,
    ShareTokenError,
    build_part_rows,
    build_share_url,
    decode_share_token,
    extract_share_token,
    load_config,
    process_excel_files,
    sort_parts,
    summarize,
)
from src.bom_summary.constants import SHARE_TOKEN_WARN_LENGTH
from src.exporters import generate_summary_csv, generate_summary_html, summary_filename

st.set_page_config(page_title="BOM Summary", page_icon="📦", layout="wide")

st.title("📦 BOM Summary")
st.markdown("""
**Merge a folder of BOM workbooks into one parts summary.**

Upload your `.xlsx` / `.xlsm` BOM files. Each file is labelled with its job number,
quantities are totalled per part, and Tier 1 parts are flagged.
""")


@st.cache_resource
def get_config():
    """Loads the extraction config once per server process."""
    return load_config()


if "processed" not in st.session_state:
    st.session_state.processed = None
if "error" not in st.session_state:
    st.session_state.error = None

# Shared link via ?data=<token>
shared = st.query_params.get("data")
if shared and st.session_state.processed is None and st.session_state.error is None:
    try:
        st.session_state.processed = decode_share_token(extract_share_token(shared))
    except ShareTokenError as e:
        st.session_state.error = f"🔗 Invalid share link: {e}"


def reset():
    st.session_state.processed = None
    st.session_state.error = None
    st.query_params.clear()


st.divider()

# 1. Input
if st.session_state.processed is None:
    st.subheader("1. Select BOM Files")
    uploads = st.file_uploader(
        "BOM workbooks",
        type=["xlsx", "xlsm"],
        accept_multiple_files=True,
        label_visibility="collapsed",
    )

    if st.button("Summarize", type="primary", use_container_width=True, key="run"):
        status = st.empty()
        try:
            st.session_state.processed = process_excel_files(
                uploads or [],
                on_progress=lambda msg: status.text(msg),
                config=get_config(),
            )
            st.session_state.error = None
            st.toast("Summary ready!", icon="📦")
        except NoSupportedFilesError as e:
            st.session_state.error = f"📁 {e} Please select .xlsx or .xlsm files."
        except NoBomDataError as e:
            st.session_state.error = f"📄 {e} Check that the files contain a BOM sheet."
        except BomSummaryError as e:
            st.session_state.error = f"❌ {e}"
        finally:
            status.empty()

    with st.expander("🔗 Open a shared summary"):
        link = st.text_input("Share link or token", key="share_input")
        if st.button("Load", key="share_load") and link:
            try:
                st.session_state.processed = decode_share_token(extract_share_token(link))
                st.session_state.error = None
            except ShareTokenError as e:
                st.session_state.error = f"🔗 Invalid share link: {e}"
            st.rerun()

if st.session_state.error:
    st.error(st.session_state.error)
    st.button("Try Again", on_click=reset)

# 2. Results
if st.session_state.processed is not None:
    data = cast(ProcessedData, st.session_state.processed)

    st.subheader("📋 Analysis Results")
    st.caption(summarize(data))

    c1, c2, c3 = st.columns(3)
    c1.metric("Unique Parts", len(data.parts))
    c2.metric("Files", len(data.file_ids))
    c3.metric("Tier 1 Parts", sum(1 for p in data.parts.values() if p["tier"] == "Tier 1"))

    sort_labels = {
        "partNumber": "Part Number",
        "tier": "Tier",
        "total_quantity": "Total Qty",
        "description": "Description",
    }
    sort_options = list(sort_labels) + list(data.file_ids)

    s1, s2 = st.columns([3, 2])
    sort_key = s1.selectbox(
        "Sort by",
        sort_options,
        index=sort_options.index(DEFAULT_SORT[0]),
        format_func=lambda k: sort_labels.get(k, k),
    )
    direction = s2.radio("Direction", ["ascending", "descending"], horizontal=True)

    rows = sort_parts(
        build_part_rows(data), key=sort_key, direction=direction, file_ids=data.file_ids
    )

    table = [
        {
            "Part Number": r["partNumber"],
            "Tier": r["tier"],
            "Total Qty": r["total_quantity"],
            "Description": r["description"] or "",
            **{fid: r["file_quantities"].get(fid, 0) for fid in data.file_ids},
        }
        for r in rows
    ]
    st.dataframe(table, use_container_width=True, hide_index=True)

    # 3. Export
    st.subheader("💾 Export")
    d1, d2 = st.columns(2)
    d1.download_button(
        "Download CSV",
        data=generate_summary_csv(rows, data.file_ids),
        file_name=summary_filename(),
        mime="text/csv",
        type="primary",
    )
    d2.download_button(
        "Download HTML",
        data=generate_summary_html(rows, data.file_ids).encode("utf-8"),
        file_name=summary_filename(ext="html"),
        mime="text/html",
    )

    # 4. Share
    with st.expander("🔗 Share this summary"):
        base_url = st.text_input("App URL", value="http://localhost:8501/")
        url, too_long = build_share_url(base_url, data)
        # Streamlit cannot read URL fragments; hand out a query-string link
        st.code(url.replace("#data=", "?data=", 1))
        if too_long:
            st.warning(
                f"⚠️ This link is longer than {SHARE_TOKEN_WARN_LENGTH} characters "
                "and may not work in every browser or chat client."
            )

    st.button("Process Again", on_click=reset)
