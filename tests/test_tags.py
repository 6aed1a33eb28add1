from pathlib import Path
import logging
import sys

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wistiaembed.api.client import WistiaClient
from wistiaembed.params.types import ServerContext
from wistiaembed.tags import API_ACCESS_ERROR, EmbedTags, strip_tags

MEDIA = {
    "id": 42,
    "hashed_id": "abc123xyz",
    "name": "Product Tour",
    "description": "<p>A short <b>tour</b> &amp; more</p>",
    "duration": 61.5,
    "section": "Extras",
    "thumbnail": {"url": "https://embed.wistia.com/deliveries/t.jpg?image_crop_resized=100x60"},
    "assets": [{"url": "https://embed.wistia.com/deliveries/v.bin", "type": "OriginalFile"}],
}


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/v1/medias/abc123xyz.json":
        return httpx.Response(200, json=MEDIA)
    if request.url.path == "/v1/medias/bare.json":
        return httpx.Response(200, json={"id": 7, "hashed_id": "bare", "name": "Bare"})
    return httpx.Response(404)


@pytest.fixture
def tags():
    client = WistiaClient("abcdef", retry_wait=0, transport=httpx.MockTransport(_handler))
    yield EmbedTags(client, ServerContext(is_secure=True, host="example.com"))
    client.close()


def test_embed_renders_with_resolved_options(tags):
    markup = tags.embed("abc123xyz", {"width": "320"})
    assert markup.startswith('<iframe src="https://fast.wistia.net/embed/iframe/abc123xyz?')
    assert "ssl=true" in markup
    assert 'width="320"' in markup

    assert tags.embed("abc123xyz", {"type": "api"}).startswith("<div")


@pytest.mark.parametrize("video_id", ["missing", "0", ""])
def test_embed_reports_api_failures(tags, caplog, video_id):
    with caplog.at_level(logging.ERROR, logger="wistiaembed"):
        assert tags.embed(video_id) == API_ACCESS_ERROR
    assert "Wistia Error" in caplog.text


def test_modifiers(tags):
    assert tags.modifier("abc123xyz", "name") == "Product Tour"
    assert tags.modifier("abc123xyz", "id") == "42"
    assert tags.modifier("abc123xyz", "duration") == "61.5"
    assert tags.modifier("abc123xyz", "section") == "Extras"
    assert tags.modifier("abc123xyz", "description") == MEDIA["description"]
    assert tags.modifier("abc123xyz", "description", {"StripTags": "yes"}) == "A short tour &amp; more"
    assert tags.modifier("abc123xyz", "description", {"striptags": "no"}) == MEDIA["description"]
    assert tags.modifier("bare", "progress") == ""
    assert tags.modifier("missing", "name") is None


def test_unknown_modifier(tags):
    with pytest.raises(ValueError):
        tags.modifier("abc123xyz", "assets")


def test_thumbnail_resizes_only_with_both_dimensions(tags):
    original = MEDIA["thumbnail"]["url"]
    assert tags.thumbnail("abc123xyz") == original
    assert tags.thumbnail("abc123xyz", {"width": "320"}) == original
    assert tags.thumbnail("abc123xyz", {"width": "320", "videoHeight": "abc"}) == original
    assert tags.thumbnail("abc123xyz", {"width": "320", "height": "180"}) == (
        "https://embed.wistia.com/deliveries/t.jpg?image_crop_resized=320x180"
    )
    assert tags.thumbnail("missing") is None


def test_asset_url_format(tags):
    assert tags.asset_url("abc123xyz") == "https://embed.wistia.com/deliveries/v/file.mp4"
    assert tags.asset_url("abc123xyz", {"format": "WEBM"}) == (
        "https://embed.wistia.com/deliveries/v/file.webm"
    )
    assert tags.asset_url("abc123xyz", {"format": "../x"}) == (
        "https://embed.wistia.com/deliveries/v/file.mp4"
    )
    assert tags.asset_url("bare") is None


def test_save_drops_section_headers():
    assert EmbedTags.save("section-Extras") == ""
    assert EmbedTags.save("") == ""
    assert EmbedTags.save(None) == ""
    assert EmbedTags.save("42") == "42"


def test_strip_tags_does_not_double_encode():
    assert strip_tags("Tom &amp; Jerry <i>again</i> ") == "Tom &amp; Jerry again"
    assert strip_tags('<a href="/x">"Quoted"</a>') == "&quot;Quoted&quot;"
