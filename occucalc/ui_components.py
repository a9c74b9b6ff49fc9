# occucalc/ui_components.py
# Streamlit section builders. All state changes go through OccupancyWorkspace.

import logging

import pandas as pd
import streamlit as st

from occucalc.code_registry import CODE_SETS
from occucalc.data_handler import ImportParseError
from occucalc.row_model import COL_AREA, COL_NAME, COL_NUMBER, COL_TYPE, MANUAL, UPLOAD
from occucalc.rooms_client import RoomsAPIError
from occucalc.view_engine import ALL_TYPES, ASC, SortState, all_visible_selected

logger = logging.getLogger(__name__)

MODE_LABELS = {MANUAL: "Manual entry", UPLOAD: "Upload Excel"}
SORT_LABELS = {'number': "#", 'name': "Room Name", 'area': "Area (m²)", 'type': "Occupancy Type", 'load': "Load"}
COL_SELECT = "Select"
COL_LOAD_SHORT = "Load"
EDITOR_COLUMNS = {COL_NUMBER: 'number', COL_NAME: 'name', COL_AREA: 'area', COL_TYPE: 'type'}
EMPTY_VIEW_MESSAGE = "No rows match your filters. Try clearing search/type filter."


def _bump(counter_key):
    """Advance a widget-key generation so stale widget state is dropped."""
    st.session_state[counter_key] = st.session_state.get(counter_key, 0) + 1


# ==================== HEADER ====================

def create_page_header():
    st.title("🏢 OccuCalc")
    st.caption(
        "Calculate occupant loads with search, filters, bulk actions, and exports. "
        "Factors are editable per code set."
    )


# ==================== SIDEBAR: CONTROLS ====================

def create_control_panel(workspace):
    """Mode, code set, type filter and search. Returns the search term."""
    st.subheader("⚙️ Controls")

    modes = list(MODE_LABELS)
    mode = st.selectbox(
        "Mode", modes, index=modes.index(workspace.mode),
        format_func=lambda m: MODE_LABELS[m], key="mode_select"
    )
    if workspace.set_mode(mode):
        _bump("editor_version")

    code_ids = list(CODE_SETS)
    code_id = st.selectbox(
        "Code", code_ids, index=code_ids.index(workspace.code_id),
        format_func=lambda c: CODE_SETS[c]['label'], key="code_select"
    )
    if workspace.set_code(code_id):
        _bump("editor_version")
        _bump("factor_version")

    filter_options = [ALL_TYPES] + workspace.types
    current_filter = workspace.filter_type if workspace.filter_type in filter_options else ALL_TYPES
    filter_type = st.selectbox(
        "Type filter", filter_options, index=filter_options.index(current_filter),
        key=f"filter_select_{st.session_state.get('factor_version', 0)}"
    )
    workspace.set_filter(filter_type)

    return st.text_input("Search", placeholder="Search room # / name…", key="search_input")


# ==================== SIDEBAR: FACTOR EDITOR ====================

def _on_factor_change(workspace, occupancy_type, widget_key):
    if workspace.set_factor(occupancy_type, st.session_state[widget_key]):
        _bump("editor_version")


def _on_add_type(workspace):
    name = st.session_state.get("new_type_input", "")
    if workspace.add_type(name):
        st.session_state.new_type_input = ""
        _bump("editor_version")
        _bump("factor_version")


def _on_delete_type(workspace, occupancy_type):
    if workspace.delete_type(occupancy_type):
        _bump("editor_version")
        _bump("factor_version")


def _on_reset_code(workspace):
    if workspace.reset_code():
        _bump("editor_version")
        _bump("factor_version")


def create_factor_editor(workspace):
    with st.expander(f"📐 Factors for: {workspace.code_label}", expanded=False):
        version = st.session_state.get("factor_version", 0)
        factors = workspace.factors
        for occupancy_type in workspace.types:
            col1, col2 = st.columns([4, 1])
            widget_key = f"factor_{workspace.code_id}_{occupancy_type}_{version}"
            with col1:
                st.number_input(
                    f"{occupancy_type} (m²/person)",
                    min_value=0.01, step=0.01, value=max(float(factors[occupancy_type]), 0.01),
                    key=widget_key,
                    on_change=_on_factor_change, args=(workspace, occupancy_type, widget_key)
                )
            with col2:
                if not workspace.is_base_type(occupancy_type):
                    st.write("")
                    st.button(
                        "🗑️", key=f"delete_type_{occupancy_type}_{version}", help="Delete this type",
                        on_click=_on_delete_type, args=(workspace, occupancy_type)
                    )

        st.text_input("Add new type", placeholder="e.g., Assembly – exhibition", key="new_type_input")
        st.caption("Default 10 m²/person (edit after adding)")
        col1, col2 = st.columns(2)
        with col1:
            st.button("➕ Add type", on_click=_on_add_type, args=(workspace,), use_container_width=True)
        with col2:
            st.button("↩️ Reset to defaults", on_click=_on_reset_code, args=(workspace,), use_container_width=True)
        st.caption(
            "These are convenience defaults. Always verify against the official code "
            "adopted in your project's jurisdiction."
        )


# ==================== SIDEBAR: TOTALS ====================

def create_totals_panel(workspace):
    st.subheader("👥 Totals by type")
    totals, grand_total = workspace.totals()
    if totals:
        st.dataframe(
            pd.DataFrame([{"Occupancy Type": t, "Occupants": v} for t, v in totals.items()]),
            hide_index=True, use_container_width=True
        )
    st.metric("Grand Total", f"{grand_total} occupants")


# ==================== SIDEBAR: BACKEND ====================

def create_backend_panel(workspace, rooms_client):
    with st.expander("🌐 Rooms backend", expanded=False):
        st.caption(f"Endpoint: {rooms_client.base_url}")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("⬆️ Push rows", use_container_width=True):
                try:
                    created = rooms_client.push_rows(workspace.active.rows, workspace.factors)
                    st.success(f"✅ Sent {created} rooms")
                except RoomsAPIError as e:
                    st.error(f"❌ {e}")
        with col2:
            if st.button("⬇️ Fetch rooms", use_container_width=True):
                try:
                    st.session_state.backend_rooms = rooms_client.list_rooms()
                except RoomsAPIError as e:
                    st.error(f"❌ {e}")
        if st.session_state.get("backend_rooms"):
            st.dataframe(pd.DataFrame(st.session_state.backend_rooms), hide_index=True)


# ==================== MAIN: ROW ACTIONS ====================

def _on_import(workspace, widget_key):
    uploaded = st.session_state.get(widget_key)
    if uploaded is None:
        return
    try:
        count = workspace.import_file(uploaded, uploaded.name)
        st.session_state.import_message = ("success", f"Imported {count} rows from '{uploaded.name}'")
        _bump("editor_version")
    except ImportParseError as e:
        st.session_state.import_message = ("error", str(e))


def _run(action, *args):
    action(*args)
    _bump("editor_version")


def create_row_actions(workspace):
    actions = [
        ("Add 1", workspace.add_rows, (1,)),
        ("Add 10", workspace.add_rows, (10,)),
        ("Add one per type", workspace.add_one_per_type, ()),
        ("Clear", workspace.clear, ()),
    ]
    for col, (label, action, args) in zip(st.columns(len(actions)), actions):
        with col:
            st.button(label, on_click=_run, args=(action, *args), use_container_width=True)

    if workspace.mode == UPLOAD:
        col1, col2 = st.columns([3, 1])
        with col1:
            widget_key = "upload_file"
            st.file_uploader(
                "Drag & drop an Excel file (.xlsx / .xls) or CSV here, or browse",
                type=["xlsx", "xls", "csv"], key=widget_key,
                on_change=_on_import, args=(workspace, widget_key)
            )
        with col2:
            st.download_button(
                "📄 Template", data=workspace.export_template(), file_name="OccuCalc_template.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True
            )
        message = st.session_state.pop("import_message", None)
        if message:
            level, text = message
            if level == "success":
                st.success(f"✅ {text}")
            else:
                st.error(f"❌ {text}")


# ==================== MAIN: SORT + BULK ====================

def _on_sort(key):
    st.session_state.sort_state = st.session_state.get("sort_state", SortState()).toggle(key)


def create_sort_bar():
    sort = st.session_state.get("sort_state", SortState())
    columns = st.columns(len(SORT_LABELS))
    for col, (key, label) in zip(columns, SORT_LABELS.items()):
        arrow = (" ▲" if sort.direction == ASC else " ▼") if sort.key == key else ""
        with col:
            st.button(f"{label}{arrow}", key=f"sort_{key}", on_click=_on_sort, args=(key,), use_container_width=True)
    return sort


def _on_select_all(workspace, widget_key):
    workspace.set_selection_all(st.session_state[widget_key])
    _bump("editor_version")


def _on_apply_type(workspace, widget_key):
    occupancy_type = st.session_state.get(widget_key)
    if occupancy_type:
        workspace.apply_type_to_selected(occupancy_type)
        _bump("editor_version")


def create_bulk_actions(workspace, view):
    selected = workspace.active.selected_count()
    version = st.session_state.get("editor_version", 0)
    col1, col2, col3, col4 = st.columns([2, 3, 1, 1])
    with col1:
        st.checkbox(
            f"Select all ({selected})", value=all_visible_selected(view),
            key=f"select_all_{version}", on_change=_on_select_all, args=(workspace, f"select_all_{version}")
        )
    with col2:
        st.selectbox(
            "Apply type to selected…", workspace.types, index=None,
            placeholder="Apply type to selected…", label_visibility="collapsed",
            key=f"bulk_type_{version}", on_change=_on_apply_type, args=(workspace, f"bulk_type_{version}")
        )
    with col3:
        st.button(
            "Duplicate", disabled=selected == 0, use_container_width=True,
            on_click=_run, args=(workspace.duplicate_selected,)
        )
    with col4:
        st.button(
            "Delete", type="primary", disabled=selected == 0, use_container_width=True,
            on_click=_run, args=(workspace.delete_selected,)
        )


# ==================== MAIN: EDITABLE TABLE ====================

def _view_dataframe(view):
    return pd.DataFrame([{
        COL_SELECT: row.selected,
        COL_NUMBER: row.number,
        COL_NAME: row.name,
        COL_AREA: '' if row.area is None else str(row.area),
        COL_TYPE: row.type,
        COL_LOAD_SHORT: row.load,
    } for row in view], columns=[COL_SELECT, COL_NUMBER, COL_NAME, COL_AREA, COL_TYPE, COL_LOAD_SHORT])


def _on_table_edit(workspace, row_ids, widget_key):
    """Route data_editor cell edits to the workspace, by view position."""
    edits = st.session_state.get(widget_key, {})
    for position, changes in edits.get("edited_rows", {}).items():
        row_id = row_ids[int(position)]
        for column, value in changes.items():
            if column == COL_SELECT:
                workspace.set_selected(row_id, bool(value))
            elif column in EDITOR_COLUMNS:
                workspace.update_field(row_id, EDITOR_COLUMNS[column], value)
    _bump("editor_version")


def create_rows_table(workspace, view):
    title = "Manual Entry" if workspace.mode == MANUAL else "Uploaded / Editable Grid"
    st.markdown(f"**{title}**")
    if not view:
        st.info(EMPTY_VIEW_MESSAGE)
        return

    widget_key = f"rows_editor_{workspace.mode}_{st.session_state.get('editor_version', 0)}"
    row_ids = [row.id for row in view]
    st.data_editor(
        _view_dataframe(view),
        key=widget_key,
        hide_index=True,
        use_container_width=True,
        num_rows="fixed",
        disabled=[COL_LOAD_SHORT],
        column_config={
            COL_SELECT: st.column_config.CheckboxColumn(COL_SELECT, width="small"),
            COL_NUMBER: st.column_config.TextColumn("#" if workspace.mode == MANUAL else COL_NUMBER, width="small"),
            COL_NAME: st.column_config.TextColumn(COL_NAME),
            COL_AREA: st.column_config.TextColumn(COL_AREA, width="small"),
            COL_TYPE: st.column_config.SelectboxColumn(COL_TYPE, options=workspace.types, required=True),
            COL_LOAD_SHORT: st.column_config.NumberColumn(COL_LOAD_SHORT, format="%d", width="small"),
        },
        on_change=_on_table_edit, args=(workspace, row_ids, widget_key)
    )

    with st.popover("🗑️ Remove a row"):
        labels = {row.id: f"{row.number} – {row.name}" for row in view}
        row_id = st.selectbox("Row", list(labels), format_func=labels.get, key="remove_row_select")
        st.button("Remove", key="remove_row_button", on_click=_run, args=(workspace.remove_row, row_id))


# ==================== MAIN: EXPORTS ====================

def _export_button(label, build, file_name, mime):
    try:
        data = build()
    except Exception as e:
        logger.error(f"Export '{file_name}' failed: {e}", exc_info=True)
        st.error(f"❌ Could not build {file_name}: {e}")
        return
    st.download_button(label, data=data, file_name=file_name, mime=mime, use_container_width=True)


def create_export_buttons(workspace):
    col1, col2, col3 = st.columns(3)
    with col1:
        _export_button(
            "📊 Export Excel", workspace.export_excel, "occupancy_data.xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
    with col2:
        _export_button("📄 PDF Summary", workspace.export_summary_pdf, "occupancy_summary.pdf", "application/pdf")
    with col3:
        _export_button("📄 PDF Detailed", workspace.export_detailed_pdf, "occupancy_detailed.pdf", "application/pdf")
