import streamlit as st
from cmsdash.config import settings
from cmsdash.logging import configure_logging
from cmsdash.ui.state import init_session
from cmsdash.ui.validation import run_all_checks

st.set_page_config(page_title="Team CMS", page_icon="\U0001f3c6", layout="wide")
configure_logging(settings.LOG_LEVEL)
init_session()

st.title("Team CMS")
st.write("Manage the roster and the team's images from the pages in the sidebar.")

errors = run_all_checks()
if errors:
    st.subheader("Setup problems")
    for err in errors:
        st.error(err)
else:
    st.success("Backend reachable, settings valid.")

st.caption(f"API: {settings.API_BASE_URL}")
