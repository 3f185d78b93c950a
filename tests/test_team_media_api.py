"""Integration tests for /team-media."""
import base64

import pytest


def _data_url(data, mime="image/png"):
    return f"data:{mime};base64,{base64.b64encode(data).decode()}"


def test_get_team_media_starts_empty(client):
    resp = client.get("/team-media")
    assert resp.status_code == 200
    assert resp.json() == {
        "team_photo_url": None,
        "hero_banner_url": None,
        "team_logo_url": None,
        "updated_at": None,
    }


@pytest.mark.parametrize("kind,field,path", [
    ("team-photo", "team_photo_url", "team/team_photo.png"),
    ("hero-banner", "hero_banner_url", "team/hero_banner.png"),
    ("logo", "team_logo_url", "team/team_logo.png"),
])
def test_single_slot_update_stores_data_url(client, media_store, make_image, kind, field, path):
    image = make_image(10, 10)
    resp = client.put("/team-media", json={"type": kind, "dataUrl": _data_url(image)})
    assert resp.status_code == 200, resp.text

    data = resp.json()
    assert data[field] == f"http://testserver/media/{path}"
    assert data["updated_at"] is not None
    assert media_store.get(path) == (image, "image/png")


def test_single_slot_update_keeps_other_slots(client, make_image):
    client.put("/team-media", json={"type": "logo", "dataUrl": _data_url(make_image(4, 4))})
    resp = client.put("/team-media", json={"type": "hero-banner", "dataUrl": _data_url(make_image(8, 4))})
    data = resp.json()
    assert data["team_logo_url"].endswith("/team/team_logo.png")
    assert data["hero_banner_url"].endswith("/team/hero_banner.png")


def test_reupload_overwrites_same_file(client, media_store, make_image):
    first, second = make_image(4, 4, color=(0, 0, 0)), make_image(4, 4, color=(255, 255, 255))
    client.put("/team-media", json={"type": "logo", "dataUrl": _data_url(first)})
    client.put("/team-media", json={"type": "logo", "dataUrl": _data_url(second)})
    assert media_store.get("team/team_logo.png")[0] == second


def test_post_behaves_like_put(client, make_image):
    resp = client.post("/team-media", json={"type": "logo", "data_url": _data_url(make_image(4, 4))})
    assert resp.status_code == 200
    assert resp.json()["team_logo_url"].endswith("/team/team_logo.png")


def test_full_update_with_hosted_urls(client):
    resp = client.put("/team-media", json={
        "teamPhotoUrl": "https://cdn.example.com/squad.jpg",
        "heroBannerUrl": "https://cdn.example.com/hero.jpg",
        "teamLogoUrl": None,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["team_photo_url"] == "https://cdn.example.com/squad.jpg"
    assert data["hero_banner_url"] == "https://cdn.example.com/hero.jpg"
    assert data["team_logo_url"] is None


def test_empty_data_url_clears_slot(client, make_image):
    client.put("/team-media", json={"type": "logo", "dataUrl": _data_url(make_image(4, 4))})
    resp = client.put("/team-media", json={"type": "logo", "dataUrl": ""})
    assert resp.status_code == 200
    assert resp.json()["team_logo_url"] is None


def test_type_without_data_url_is_422(client):
    assert client.put("/team-media", json={"type": "logo"}).status_code == 422


def test_unknown_kind_is_422(client, make_image):
    resp = client.put("/team-media", json={"type": "mascot", "dataUrl": _data_url(make_image(4, 4))})
    assert resp.status_code == 422


def test_invalid_data_url_is_400(client):
    resp = client.put("/team-media", json={"type": "logo", "dataUrl": "data:image/png;base64,@@@"})
    assert resp.status_code == 400
    assert "Invalid base64" in resp.json()["detail"]


def test_no_store_header_on_team_media(client):
    assert client.get("/team-media").headers["cache-control"] == "no-store"
