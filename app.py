"""
Subx Early Access Waitlist
"""
import logging
import streamlit as st

from src.services.income_range_service import set_income_ranges_file
from src.services.persistence_service import PersistenceAdapter
from src.services.registration_service import RegistrationStore
from src.services.storage_service import JsonFileStorage
from src.ui.signup_page import render_signup_page
from src.ui.success_page import render_success_page
from src.utils.config import Settings, configure_logging, get_settings

logger = logging.getLogger(__name__)


st.set_page_config(
    page_title="Subx Early Access",
    page_icon="🏠",
    layout="centered",
    initial_sidebar_state="collapsed"
)


@st.cache_resource
def get_store(_settings: Settings) -> RegistrationStore:
    """Create the one registration store for this server process."""
    adapter = PersistenceAdapter(
        JsonFileStorage(_settings.storage_dir),
        key=_settings.storage_key,
        baseline=_settings.baseline_count,
    )
    return RegistrationStore.load(adapter, referral_base_url=_settings.referral_base_url)


def initialize_session_state():
    """Initialize session state defaults."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "signup"


def apply_custom_css():
    """Apply custom CSS."""
    st.markdown("""
        <style>
        .stApp {
            background: linear-gradient(135deg, #0f0c29 0%, #1a1a2e 50%, #16213e 100%);
        }

        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        header, [data-testid="stHeader"] {
            visibility: hidden;
            height: 0;
        }

        .stButton > button, .stFormSubmitButton > button {
            border-radius: 12px;
            font-weight: 600;
            border: none;
        }

        .stFormSubmitButton > button[kind="primary"] {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
        }

        .stTextInput > div > div > input {
            background: #16213e;
            border: 1px solid #2d3748;
            border-radius: 8px;
            color: #f1f5f9;
        }
        </style>
    """, unsafe_allow_html=True)


def render_current_page(store: RegistrationStore, settings: Settings):
    """Render the page selected in session state."""
    try:
        if st.session_state.current_page == "signup":
            render_signup_page(store, settings)

        elif st.session_state.current_page == "success":
            render_success_page(store)

        else:
            st.error(f"Unknown page: {st.session_state.current_page}")
            if st.button("Back to Home"):
                st.session_state.current_page = "signup"
                st.rerun()

    except Exception as e:
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again later")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to Home"):
            st.session_state.current_page = "signup"
            st.rerun()


def main():
    """Application entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    set_income_ranges_file(settings.income_ranges_file)

    initialize_session_state()
    apply_custom_css()
    render_current_page(get_store(settings), settings)


if __name__ == "__main__":
    main()
