"""Success page shown after signup, with the registrant's referral link."""
from typing import Any, MutableMapping, Optional

import streamlit as st

from src.models.registrant import Registrant
from src.services.registration_service import RegistrationStore
from src.ui.html_utils import html_block, safe_text
from src.utils.referral import SHARE_TITLE, build_share_message

# The store is shared by every browser session, so each session keeps its own signup
SESSION_REGISTRANT_KEY = "signup_registrant"

SUCCESS_MESSAGE = (
    "You'll be among the first to get access when we go live. We'll send you "
    "updates about our launch and exclusive investment opportunities."
)


def remember_registrant(session_state: MutableMapping[str, Any], registrant: Registrant) -> None:
    """Record the registrant created by this browser session."""
    session_state[SESSION_REGISTRANT_KEY] = registrant


def session_registrant(session_state: MutableMapping[str, Any]) -> Optional[Registrant]:
    """Return the registrant created by this browser session, or None."""
    return session_state.get(SESSION_REGISTRANT_KEY)


def _success_card_html(registrant: Registrant) -> str:
    """Return the thank-you card HTML."""
    return html_block(
        f"""
        <div style="text-align: center; padding: 24px; background: rgba(22, 33, 62, 0.8);
                    border-radius: 16px; margin-bottom: 16px;">
            <div style="width: 80px; height: 80px; border-radius: 50%; margin: 0 auto 24px;
                        background: #10b981; color: white; font-size: 40px; line-height: 80px;">✓</div>
            <h2 style="color: #f8fafc;">Thanks for registering, {safe_text(registrant.full_name)}!</h2>
            <p style="color: #cbd5e1; font-size: 16px;">{SUCCESS_MESSAGE}</p>
        </div>
        """
    )


def _referral_link_html(referral_url: str) -> str:
    """Return the click-to-copy referral link HTML."""
    url = safe_text(referral_url)
    return html_block(
        f"""
        <div style="margin: 16px 0;">
            <h4 style="color: #f8fafc; text-align: center;">Invite others and get early access priority</h4>
            <input type="text" value="{url}" readonly
                   style="width: 100%; padding: 10px; background: rgba(15, 23, 42, 0.6);
                          border: 1px solid rgba(148, 163, 184, 0.3); border-radius: 8px;
                          color: #e2e8f0; font-size: 13px; font-family: monospace;"
                   onclick="this.select(); document.execCommand('copy');" />
            <div style="color: #cbd5e1; font-size: 11px; margin-top: 6px; text-align: center;">
                Click the link above to copy it
            </div>
        </div>
        """
    )


def render_success_page(store: RegistrationStore) -> None:
    """Render the success page, or send the visitor back if this session has not signed up."""
    registrant = session_registrant(st.session_state)

    if registrant is None:
        st.session_state.current_page = "signup"
        st.rerun()
        return

    referral_url = store.referral_url_for(registrant)

    st.markdown(_success_card_html(registrant), unsafe_allow_html=True)
    st.markdown(_referral_link_html(referral_url), unsafe_allow_html=True)

    with st.expander(f"📣 {SHARE_TITLE}"):
        st.code(build_share_message(referral_url), language=None)

    if store.last_persistence_error is not None:
        st.warning("Your signup was recorded but could not be saved to disk yet.")

    if st.button("Back to Home", use_container_width=True, key="success_back_home"):
        st.session_state.current_page = "signup"
        st.rerun()
