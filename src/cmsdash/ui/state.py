"""Session-state helpers for the Streamlit UI.

No repositories, no services. Only reads/writes ``st.session_state``.
"""
import streamlit as st

from cmsdash.imaging.gate import ResultGate


def init_session() -> None:
    """Initialize session state variables."""
    st.session_state.setdefault("editing_player_id", None)


def get_editing_player() -> str | None:
    return st.session_state.get("editing_player_id")


def set_editing_player(player_id: str | None) -> None:
    st.session_state["editing_player_id"] = player_id


def get_gate(field_key: str) -> ResultGate:
    """One result gate per image field, kept for the whole session."""
    key = f"gate::{field_key}"
    if key not in st.session_state:
        st.session_state[key] = ResultGate()
    return st.session_state[key]


def uploader_key(field_key: str) -> str:
    return f"uploader::{field_key}::{st.session_state.get(f'uploader_gen::{field_key}', 0)}"


def rotate_uploader_key(field_key: str) -> None:
    """Give the file picker a fresh identity so the same file can be picked again."""
    gen_key = f"uploader_gen::{field_key}"
    st.session_state[gen_key] = st.session_state.get(gen_key, 0) + 1


def get_field_value(field_key: str) -> str | None:
    return st.session_state.get(f"value::{field_key}")


def set_field_value(field_key: str, value: str | None) -> None:
    st.session_state[f"value::{field_key}"] = value
