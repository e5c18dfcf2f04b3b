"""Signup counter component."""
import streamlit as st

from src.ui.html_utils import html_block


def format_count(count: int) -> str:
    """Format a count with thousands separators, e.g. 137582 → "137,582"."""
    return f"{count:,}"


def _counter_html(count: int) -> str:
    """Return counter HTML."""
    return html_block(
        f"""
        <div class="subx-counter" style="text-align: center; margin: 16px 0;">
            <span style="font-weight: 700; font-size: 18px; color: #667eea;">{format_count(count)}</span>
            <span style="font-size: 16px; color: #e2e8f0;"> people already joined!</span>
        </div>
        """
    )


def render_counter(count: int) -> None:
    """Render the live signup counter."""
    st.markdown(_counter_html(count), unsafe_allow_html=True)
