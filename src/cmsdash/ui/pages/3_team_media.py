import streamlit as st
from cmsdash.api.schemas.team_media import MediaKindDTO
from cmsdash.ui.api_client import get_client, APIError
from cmsdash.ui.uploads import image_uploader

st.title("Team Media")

client = get_client()

SLOTS = [
    (MediaKindDTO.TEAM_PHOTO, "Team Photo", "team_photo_url"),
    (MediaKindDTO.HERO_BANNER, "Hero Banner", "hero_banner_url"),
    (MediaKindDTO.LOGO, "Team Logo", "team_logo_url"),
]

try:
    media = client.get_team_media()
except APIError as e:
    st.error(f"Failed to load team media: {e.detail}")
    st.stop()


def _save(kind: MediaKindDTO, value: str | None) -> None:
    try:
        client.update_team_media(kind, value)
        st.toast("Saved" if value else "Removed", icon="✅")
    except APIError as e:
        st.error(f"Failed to save: {e.detail}")


for kind, title, field in SLOTS:
    with st.container(border=True):
        st.subheader(title)
        image_uploader(
            title,
            key=f"team_media::{kind.value}",
            value=getattr(media, field),
            on_change=lambda v, k=kind: _save(k, v),
            placeholder=f"Upload {title.lower()}",
        )

if media.updated_at:
    st.caption(f"Last updated {media.updated_at:%Y-%m-%d %H:%M} UTC")
