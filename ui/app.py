"""Streamlit UI for the document writer.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Any  # noqa: E402

import streamlit as st  # noqa: E402

from ui import helpers  # noqa: E402

# Configuration
BACKEND_URL = "http://localhost:8000"

TONES = ["professional", "casual", "formal", "friendly", "informative", "persuasive"]
NOTE_CATEGORIES = ["facts", "concepts", "opinions", "examples", "other"]

# Page config
st.set_page_config(page_title="Document Writer", page_icon="📝", layout="wide")

# Initialize session state
if "error" not in st.session_state:
    st.session_state.error = None
if "view" not in st.session_state:
    st.session_state.view = "sections"


def run_action(action: Any, *args: Any, **kwargs: Any) -> Any:
    """Call an API helper, keeping its error message for display."""
    try:
        result = action(BACKEND_URL, *args, **kwargs)
    except Exception as e:
        st.session_state.error = helpers.error_message(e)
        return None
    st.session_state.error = None
    return result


try:
    state = helpers.get_session_state(BACKEND_URL)
except Exception as e:
    st.error(f"❌ Cannot reach the API at {BACKEND_URL}: {helpers.error_message(e)}")
    st.stop()

sections: list[dict[str, Any]] = state["sections"]
documents: list[dict[str, Any]] = state["documents"]
open_document = next((d for d in documents if d["id"] == state.get("open_document_id")), None)

# Title
st.title("📝 Document Writer")
st.caption(f"**Mode:** {helpers.format_mode(state['mode'])}")
if state.get("notice"):
    st.info(state["notice"])
if state.get("error"):
    st.error(f"🚨 {state['error']}")
if st.session_state.error:
    st.error(f"❌ {st.session_state.error}")

# =============================================================================
# SIDEBAR - DOCUMENTS
# =============================================================================
with st.sidebar:
    st.subheader("📁 Documents")

    with st.form("save_form"):
        title = st.text_input(
            "Document title", value=open_document["title"] if open_document else ""
        )
        if st.form_submit_button("💾 Save", type="primary", use_container_width=True):
            if not title.strip():
                st.session_state.error = "Document title must not be blank"
            else:
                run_action(helpers.save_document, title)
            st.rerun()

    if st.button("➕ New document", use_container_width=True):
        run_action(helpers.new_document)
        st.rerun()

    st.divider()

    if not documents:
        st.caption("_No saved documents_")
    for document in documents:
        st.markdown(helpers.format_document_label(document))
        col_open, col_delete = st.columns(2)
        with col_open:
            if st.button("Open", key=f"open_{document['id']}", use_container_width=True):
                run_action(helpers.open_document, document["id"])
                st.rerun()
        with col_delete:
            if st.button("Delete", key=f"delete_{document['id']}", use_container_width=True):
                run_action(helpers.delete_document, document["id"])
                st.rerun()

    st.divider()

    uploaded = st.file_uploader("Import text", type=["txt", "md", "rtf"])
    if uploaded is not None and st.button("📥 Import", use_container_width=True):
        run_action(helpers.import_file, uploaded.name, uploaded.getvalue())
        st.rerun()

    printable = run_action(helpers.get_printable, open_document["title"] if open_document else None)
    if printable:
        st.download_button(
            "🖨️ Download printable HTML",
            data=printable,
            file_name="document.html",
            mime="text/html",
            use_container_width=True,
        )

# =============================================================================
# MAIN - SECTIONS OR CONTINUOUS VIEW
# =============================================================================
view = st.radio(
    "View",
    options=["sections", "continuous"],
    format_func=lambda v: "Sections" if v == "sections" else "Continuous",
    horizontal=True,
    key="view",
)

if view == "continuous":
    merged = run_action(helpers.get_continuous) or ""
    edited = st.text_area("Merged document (HTML)", value=merged, height=500)
    st.caption("Keep one `<h2>` heading per section; sync is refused if headings are added or removed.")
    if st.button("🔄 Sync to sections", type="primary"):
        run_action(helpers.sync_continuous, edited)
        st.rerun()
    with st.expander("Preview"):
        st.markdown(edited, unsafe_allow_html=True)
else:
    for section in sections:
        section_id = section["id"]
        status = helpers.section_status(section)

        col_heading, col_toggle = st.columns([6, 1])
        with col_heading:
            st.subheader(f"{section['title']} ({status})")
        with col_toggle:
            if st.button(
                "Collapse" if section["expanded"] else "Expand", key=f"toggle_{section_id}"
            ):
                run_action(helpers.toggle_section, section_id)
                st.rerun()

        if not section["expanded"]:
            continue

        with st.container(border=True):
            with st.form(f"section_form_{section_id}"):
                new_title = st.text_input("Title", value=section["title"], key=f"title_{section_id}")
                new_input = st.text_area(
                    "Input", value=section["input"], height=120, key=f"input_{section_id}"
                )

                generation = section["generation"]
                col_words, col_tone = st.columns(2)
                with col_words:
                    word_count = st.number_input(
                        "Target words",
                        min_value=1,
                        value=generation["target_word_count"],
                        step=50,
                        key=f"words_{section_id}",
                    )
                with col_tone:
                    tone = st.selectbox(
                        "Tone",
                        options=TONES,
                        index=TONES.index(generation["tone"]),
                        key=f"tone_{section_id}",
                    )
                extra = st.text_input(
                    "Extra instructions",
                    value=generation["extra_instructions"],
                    key=f"extra_{section_id}",
                )

                if st.form_submit_button("Apply"):
                    run_action(
                        helpers.update_section,
                        section_id,
                        title=new_title,
                        input=new_input,
                        generation={
                            "target_word_count": int(word_count),
                            "tone": tone,
                            "extra_instructions": extra,
                        },
                    )
                    st.rerun()

            st.markdown("**Notes**")
            for category in NOTE_CATEGORIES:
                notes = section["notes"][category]
                filled = sum(1 for n in notes if n.strip())
                shown = section["expanded_notes"][category]
                with st.container(border=True):
                    col_label, col_show = st.columns([6, 1])
                    with col_label:
                        st.caption(f"{category.capitalize()} ({filled})")
                    with col_show:
                        if st.button(
                            "Hide" if shown else "Show", key=f"notes_{section_id}_{category}"
                        ):
                            run_action(helpers.toggle_notes, section_id, category)
                            st.rerun()
                    if not shown:
                        continue
                    for index, note in enumerate(notes):
                        col_note, col_save, col_remove = st.columns([6, 1, 1])
                        with col_note:
                            value = st.text_input(
                                f"{category} {index + 1}",
                                value=note,
                                key=f"note_{section_id}_{category}_{index}",
                                label_visibility="collapsed",
                            )
                        with col_save:
                            if st.button("✓", key=f"save_note_{section_id}_{category}_{index}"):
                                run_action(helpers.update_note, section_id, category, index, value)
                                st.rerun()
                        with col_remove:
                            if st.button("✕", key=f"rm_note_{section_id}_{category}_{index}"):
                                run_action(helpers.remove_note, section_id, category, index)
                                st.rerun()
                    if st.button("Add note", key=f"add_note_{section_id}_{category}"):
                        run_action(helpers.add_note, section_id, category)
                        st.rerun()

            col_generate, col_delete = st.columns(2)
            with col_generate:
                if st.button("✨ Generate", key=f"generate_{section_id}", type="primary"):
                    with st.spinner("Generating..."):
                        run_action(helpers.generate_section, section_id)
                    st.rerun()
            with col_delete:
                if st.button(
                    "🗑️ Delete section",
                    key=f"delete_section_{section_id}",
                    disabled=len(sections) <= 1,
                ):
                    run_action(helpers.delete_section, section_id)
                    st.rerun()

            if section.get("error"):
                st.error(section["error"])

            st.markdown("**Output**")
            if section["output"]:
                words = helpers.count_words(section["output"])
                st.caption(f"{words} words (target {generation['target_word_count']})")
                st.markdown(section["output"], unsafe_allow_html=True)
            else:
                st.caption("_No content generated yet._")

    if st.button("➕ Add section"):
        run_action(helpers.add_section)
        st.rerun()
