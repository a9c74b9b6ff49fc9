# app.py - OccuCalc: occupant load calculator

import logging

import streamlit as st

from occucalc.config import load_settings

settings = load_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_file),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# --- Component Imports ---
try:
    from occucalc.rooms_client import RoomsClient
    from occucalc.state_handler import LocalStateStore
    from occucalc.workspace import OccupancyWorkspace
    from occucalc.ui_components import (
        create_backend_panel, create_bulk_actions, create_control_panel, create_export_buttons,
        create_factor_editor, create_page_header, create_row_actions, create_rows_table,
        create_sort_bar, create_totals_panel
    )
except ImportError as e:
    st.error(f"Failed to import a necessary component: {e}")
    logger.error(f"ImportError: {e}", exc_info=True)
    st.stop()


def _api_url():
    """Streamlit secrets ([occucalc] api_url) win over the environment."""
    try:
        return st.secrets["occucalc"]["api_url"]
    except Exception:
        return settings.api_url


def get_workspace():
    if 'workspace' not in st.session_state:
        store = LocalStateStore(settings.state_dir)
        st.session_state.workspace = OccupancyWorkspace(store)
        logger.info(f"Workspace loaded from {settings.state_dir}")
    return st.session_state.workspace


def main():
    st.set_page_config(
        page_title="OccuCalc - Occupant Load Calculator",
        page_icon="🏢",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    # Session State Initializations
    if 'editor_version' not in st.session_state: st.session_state.editor_version = 0
    if 'factor_version' not in st.session_state: st.session_state.factor_version = 0

    workspace = get_workspace()
    rooms_client = RoomsClient(_api_url(), timeout=settings.api_timeout)

    create_page_header()

    # ============= SIDEBAR =============
    with st.sidebar:
        search = create_control_panel(workspace)
        st.markdown("---")
        create_factor_editor(workspace)
        st.markdown("---")
        create_totals_panel(workspace)
        st.markdown("---")
        create_backend_panel(workspace, rooms_client)

    # ============= MAIN =============
    create_row_actions(workspace)
    st.markdown("---")
    sort = create_sort_bar()
    view = workspace.view(search, sort)
    create_bulk_actions(workspace, view)
    create_rows_table(workspace, view)
    st.markdown("---")
    create_export_buttons(workspace)


if __name__ == "__main__":
    main()
