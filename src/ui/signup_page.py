"""Waitlist signup page: hero, live counter and signup form."""
import streamlit as st

from src.services.income_range_service import (
    DEFAULT_INCOME_RANGE,
    get_income_range_label,
    get_income_range_values,
)
from src.services.registration_service import RegistrationStore
from src.services.submission_service import SignupFlow, simulated_network
from src.ui.counter import render_counter
from src.ui.html_utils import html_block
from src.ui.success_page import remember_registrant
from src.utils.config import Settings
from src.utils.validation import error_message

SIGNUP_ERRORS_KEY = "signup_field_errors"
SIGNUP_FORM_ERROR_KEY = "signup_form_error"

HERO_TITLE = "Join Nigeria's Biggest Real Estate Investment Community"
HERO_SUBTITLE = (
    "Get early access to invest in property with as little as ₦35,000. "
    "Limited to 500,000 spots only."
)
DISCLAIMER = (
    "You'll receive project updates, exclusive invites, and early investment opportunities."
)


def _hero_html() -> str:
    """Return header and hero HTML."""
    return html_block(
        f"""
        <div style="text-align: center; padding: 24px 0 8px;">
            <div style="display: inline-flex; align-items: center; gap: 8px;">
                <span style="font-size: 28px; font-weight: 800; color: #f8fafc;">Subx</span>
                <span style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
                             color: white; font-size: 12px; font-weight: 600;
                             padding: 4px 10px; border-radius: 999px;">Early Access</span>
            </div>
            <h2 style="color: #f8fafc; margin: 20px 0 8px;">{HERO_TITLE}</h2>
            <p style="color: #cbd5e1; font-size: 16px;">{HERO_SUBTITLE}</p>
        </div>
        """
    )


def _ensure_form_state() -> None:
    if SIGNUP_ERRORS_KEY not in st.session_state:
        st.session_state[SIGNUP_ERRORS_KEY] = {}
    if SIGNUP_FORM_ERROR_KEY not in st.session_state:
        st.session_state[SIGNUP_FORM_ERROR_KEY] = None


def _show_field_error(errors: dict, field: str) -> None:
    if field in errors:
        st.caption(f":red[{error_message(field, errors[field])}]")


def render_signup_page(store: RegistrationStore, settings: Settings) -> None:
    """
    Render the signup page.

    On success the new registrant is kept in this session's state and the
    app moves to the success page.
    """
    _ensure_form_state()

    st.markdown(_hero_html(), unsafe_allow_html=True)
    render_counter(store.signup_count)

    income_values = get_income_range_values()
    default_index = (
        income_values.index(DEFAULT_INCOME_RANGE) if DEFAULT_INCOME_RANGE in income_values else 0
    )
    errors = st.session_state[SIGNUP_ERRORS_KEY]

    with st.form("signup_form"):
        full_name = st.text_input("Full Name", placeholder="Enter your full name")
        _show_field_error(errors, "full_name")

        email = st.text_input("Email Address", placeholder="Enter your email address")
        _show_field_error(errors, "email")

        phone_number = st.text_input("Phone Number", placeholder="Enter your phone number")
        _show_field_error(errors, "phone_number")

        income_range = st.selectbox(
            "Income Range",
            options=income_values,
            index=default_index,
            format_func=lambda value: get_income_range_label(value) or value,
        )
        _show_field_error(errors, "income_range")

        submitted = st.form_submit_button(
            "Join Now – Reserve My Spot",
            use_container_width=True,
            type="primary",
        )

    if st.session_state[SIGNUP_FORM_ERROR_KEY]:
        st.error(st.session_state[SIGNUP_FORM_ERROR_KEY])

    st.markdown(
        f"<p style='text-align: center; color: #94a3b8;'>{DISCLAIMER}</p>",
        unsafe_allow_html=True,
    )

    if not submitted:
        return

    flow = SignupFlow(
        store,
        network=simulated_network(settings.submit_delay),
        income_ranges=income_values,
    )
    with st.spinner("Reserving your spot..."):
        result = flow.submit({
            "full_name": full_name,
            "email": email,
            "phone_number": phone_number,
            "income_range": income_range or "",
        })

    st.session_state[SIGNUP_ERRORS_KEY] = result.errors
    st.session_state[SIGNUP_FORM_ERROR_KEY] = result.form_error

    if result.succeeded:
        remember_registrant(st.session_state, result.registrant)
        st.session_state.current_page = "success"
    st.rerun()
