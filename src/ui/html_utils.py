"""Helpers for building HTML snippets rendered through st.markdown."""
from html import escape
from textwrap import dedent


def html_block(template: str) -> str:
    """
    Flatten multi-line HTML before handing it to Streamlit.

    Lines indented by four or more spaces would be rendered as Markdown code
    blocks, so every line is left-stripped after dedenting.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def safe_text(value: object) -> str:
    """Escape user-supplied text for interpolation into HTML."""
    return escape("" if value is None else str(value), quote=True)
