import streamlit as st
from cmsdash.api.schemas.players import (
    PlayerCreate, PlayerStatusDTO, PlayerUpdate, RoleTagDTO, Socials,
)
from cmsdash.ui.api_client import get_client, APIError
from cmsdash.ui.state import (
    get_editing_player, get_field_value, init_session, set_editing_player, set_field_value,
)
from cmsdash.ui.uploads import image_uploader

init_session()
st.title("Roster")

client = get_client()

try:
    players = client.list_players().items
except APIError as e:
    st.error(f"Failed to load players: {e.detail}")
    st.stop()

editing_id = get_editing_player()
editing = next((p for p in players if p.id == editing_id), None)

# --- Player form ---
st.subheader(f"Edit {editing.full_name}" if editing else "Add player")

photo_key = f"player_photo::{editing.id if editing else 'new'}"
if get_field_value(photo_key) is None and editing and editing.photo_url:
    set_field_value(photo_key, editing.photo_url)

image_uploader(
    "Photo",
    key=photo_key,
    value=get_field_value(photo_key),
    on_change=lambda v: set_field_value(photo_key, v or ""),
)

roles = list(RoleTagDTO)
statuses = list(PlayerStatusDTO)
with st.form("player_form", clear_on_submit=editing is None):
    full_name = st.text_input("Full name", value=editing.full_name if editing else "")
    jersey = st.number_input(
        "Jersey number", min_value=0, max_value=999, step=1,
        value=editing.jersey_number if editing else 0,
    )
    role = st.selectbox(
        "Role", roles, format_func=lambda r: r.value,
        index=roles.index(editing.role_tag) if editing else roles.index(RoleTagDTO.PLAYER),
    )
    position = st.text_input("Position", value=editing.position if editing else "")
    tagline = st.text_input("Tagline", value=(editing.tagline or "") if editing else "")
    bio = st.text_area("Bio", value=(editing.bio or "") if editing else "")
    active = st.toggle(
        "Active", value=editing.status == PlayerStatusDTO.ACTIVE if editing else True,
    )
    s1, s2, s3 = st.columns(3)
    socials = editing.socials if editing else Socials()
    instagram = s1.text_input("Instagram", value=socials.instagram or "")
    twitter = s2.text_input("Twitter", value=socials.twitter or "")
    linkedin = s3.text_input("LinkedIn", value=socials.linkedin or "")
    submitted = st.form_submit_button("Save")

if submitted:
    fields = dict(
        full_name=full_name,
        jersey_number=int(jersey),
        role_tag=role,
        position=position,
        tagline=tagline or None,
        bio=bio or None,
        photo_url=get_field_value(photo_key) or None,
        status=PlayerStatusDTO.ACTIVE if active else PlayerStatusDTO.INACTIVE,
        socials=Socials(instagram=instagram or None, twitter=twitter or None, linkedin=linkedin or None),
    )
    try:
        if editing:
            client.update_player(editing.id, PlayerUpdate(**fields))
            st.toast(f"Updated {full_name}", icon="✅")
        else:
            client.create_player(PlayerCreate(**fields))
            st.toast(f"Added {full_name}", icon="✅")
    except ValueError as e:
        st.error(str(e))
    except APIError as e:
        st.error(f"Failed to save player: {e.detail}")
    else:
        set_field_value(photo_key, None)
        set_editing_player(None)
        st.rerun()

if editing and st.button("Cancel editing"):
    set_field_value(photo_key, None)
    set_editing_player(None)
    st.rerun()

st.divider()

# --- List players ---
if not players:
    st.info("No players yet.")
else:
    st.write(f"Total Players: {len(players)}")
    for p in players:
        with st.container(border=True):
            c1, c2, c3, c4, c5 = st.columns([1, 3, 2, 1, 2])
            if p.photo_url:
                c1.image(p.photo_url, width=48)
            c2.write(f"**#{p.jersey_number} {p.full_name}**  \n{p.position}")
            c3.write(p.role_tag.value)
            c4.write("✅" if p.status == PlayerStatusDTO.ACTIVE else "⏸️")
            if c5.button("Edit", key=f"edit_{p.id}"):
                set_editing_player(p.id)
                st.rerun()
            if c5.button("Delete", key=f"del_{p.id}"):
                try:
                    client.delete_player(p.id)
                    st.toast(f"Deleted {p.full_name}")
                    st.rerun()
                except APIError as e:
                    st.error(f"Failed to delete: {e.detail}")
