"""CPQ Service — Streamlit operator console entry point."""

import streamlit as st

from api_client import get_health

st.set_page_config(
    page_title="CPQ Console",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    :root {
        --primary-blue: #3B82F6;
        --bg-dark: #0F172A;
        --bg-card: #1E293B;
        --text-light: #F1F5F9;
    }
    h1, h2, h3 {
        color: var(--text-light) !important;
        font-weight: 600 !important;
    }
    .stButton>button {
        background-color: var(--primary-blue);
        color: white;
        border: none;
    }
    [data-testid="stSidebar"] {
        background-color: var(--bg-card);
    }
</style>
""", unsafe_allow_html=True)

st.title("CPQ Console")
st.caption("Configure, price and quote against the live rule table")

try:
    health = get_health()
    st.success(f"API {health['status']} (uptime {health['uptime']:.0f}s)")
except Exception as e:
    st.error(f"API unreachable: {e}")

with st.expander("How pricing works", expanded=False):
    st.markdown("""
- **Validation first**: every configuration is checked for unknown options, conflicts and
  missing dependencies. A single invalid item rejects the whole quote.
- **Ordered rules**: applicable rules run in ascending priority; ties keep table order.
- **No negative prices**: each line item is floored at zero after all rules.
- **Rounding**: only the quote total and tax are rounded to cents.
""")

st.markdown("---")
st.markdown("Use the sidebar to browse the catalog or build a quote.")
