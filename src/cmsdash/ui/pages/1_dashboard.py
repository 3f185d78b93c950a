import streamlit as st
from cmsdash.ui.api_client import get_client, APIError

st.title("Dashboard")

client = get_client()
try:
    summary = client.get_dashboard()
except APIError as e:
    st.error(f"Failed to load dashboard: {e.detail}")
    st.stop()

c1, c2, c3, c4 = st.columns(4)
c1.metric("Players", summary.players)
c2.metric("Active", summary.active_players)
c3.metric("Captains", summary.captains)
c4.metric("Team media", f"{summary.media_slots_set}/{summary.media_slots_total}")
