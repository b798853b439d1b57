from __future__ import annotations

import streamlit as st

from core.config import get_settings
from core.db import get_conn, ensure_schema
from core.logging_setup import setup_logging

st.set_page_config(page_title="Vet Supply Desk", page_icon="💊", layout="wide")

st.title("💊 Vet Supply Desk")
st.caption("Product batches, sales with stock decrement, expiration tracking and monthly reports for a veterinary-supply trader.")

settings = get_settings()
setup_logging(settings)
conn = get_conn(settings.db_path)
ensure_schema(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    if st.session_state.get("user_email"):
        st.write(f"**Signed in:** {st.session_state['user_email']} ({st.session_state.get('user_role')})")

st.info(
    "Use the left sidebar navigation. Start with **🧪 Data Management** to load demo data, then try **Products**, **Sales**, **Inventory** and **Reports**.",
    icon="ℹ️",
)
