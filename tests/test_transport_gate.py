import base64

import pytest

from cmsdash.imaging.gate import ResultGate
from cmsdash.imaging.transport import extension_for, is_data_url, parse_data_url, to_data_url
from cmsdash.imaging.types import EncodedBlob


@pytest.mark.parametrize("mime", ["image/jpeg", "image/webp", "image/png"])
def test_data_url_reverses_to_same_length_and_mime(mime):
    blob = EncodedBlob(data=bytes(range(256)) * 3, mime_type=mime, width=10, height=10)
    url = to_data_url(blob)
    assert url.startswith(f"data:{mime};base64,")
    parsed = parse_data_url(url)
    assert parsed.mime_type == mime
    assert len(parsed.data) == blob.size


def test_parse_data_url_rejects_non_data_urls():
    with pytest.raises(ValueError, match="Invalid image dataUrl"):
        parse_data_url("https://cdn.example.com/logo.png")


def test_parse_data_url_rejects_bad_base64():
    with pytest.raises(ValueError, match="Invalid base64"):
        parse_data_url("data:image/png;base64,@@@@")


def test_parse_data_url_normalises_mime_case():
    payload = base64.b64encode(b"abc").decode()
    assert parse_data_url(f"data:IMAGE/PNG;base64,{payload}").mime_type == "image/png"


def test_is_data_url():
    assert is_data_url("data:image/png;base64,AAAA")
    assert not is_data_url("http://x/y.png")
    assert not is_data_url(None)


def test_extension_for():
    assert extension_for("image/jpeg") == "jpg"
    assert extension_for("image/webp") == "webp"
    assert extension_for("application/octet-stream") == "bin"


# ---------------------------------------------------------------------------
# ResultGate
# ---------------------------------------------------------------------------


def test_gate_delivers_current_result():
    gate = ResultGate()
    received = []
    token = gate.begin()
    assert gate.deliver(token, "data:a", received.append)
    assert received == ["data:a"]


def test_gate_drops_superseded_result():
    gate = ResultGate()
    received = []
    first = gate.begin()
    second = gate.begin()
    assert not gate.deliver(first, "old", received.append)
    assert gate.deliver(second, "new", received.append)
    assert received == ["new"]


def test_gate_invalidate_drops_in_flight_result():
    gate = ResultGate()
    received = []
    token = gate.begin()
    gate.invalidate()
    assert not gate.is_current(token)
    assert not gate.deliver(token, "late", received.append)
    assert received == []
