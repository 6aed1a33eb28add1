from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wistiaembed.api.models import VideoRecord
from wistiaembed.params.builder import ResolvedOptions, build_options, is_kept_value, option_lookup_key
from wistiaembed.params.schema import default_schema, parse_schema
from wistiaembed.params.types import ServerContext

VIDEO = VideoRecord.stub("abc123xyz", "Product Tour")


def test_defaults_only_produce_general_group():
    options = build_options({}, VIDEO)
    assert list(options) == ["general"]
    general = options.general
    assert general["videoWidth"] == 640
    assert general["videoHeight"] == 360
    assert general["playerColor"] == "636155"
    assert general["type"] == "iframe"
    assert general["autoPlay"] is False
    assert set(general) == set(default_schema().group("general").names)
    assert options.socialbar is None
    assert options.analytics is None


def test_general_overrides_and_aliases():
    options = build_options(
        {"Width": "800", "videoHeight": "450", "playerColor": "#abc", "autoplay": "YES"}, VIDEO
    )
    general = options.general
    assert general["videoWidth"] == 800
    assert general["videoHeight"] == 450
    assert general["playerColor"] == "aabbcc"
    assert general["autoPlay"] is True


def test_invalid_values_fall_back_to_defaults():
    options = build_options({"width": "wide", "playerColor": "red", "type": "flash"}, VIDEO)
    assert options.general["videoWidth"] == 640
    assert options.general["playerColor"] == "636155"
    assert options.embed_type == "iframe"


def test_socialbar_from_bare_key():
    options = build_options({"socialbar": "embed-twitter"}, VIDEO)
    socialbar = options.socialbar
    assert socialbar["buttons"] == ("embed", "twitter")
    assert socialbar["downloadType"] == "sd_mp4"
    assert socialbar["showTweetCount"] is False
    # empty url and string options are left out
    assert "pageUrl" not in socialbar
    assert "tweetText" not in socialbar


def test_socialbar_without_valid_buttons_is_dropped():
    assert build_options({"socialbar": "bogus"}, VIDEO).socialbar is None
    assert build_options({"socialbar:tweetText": "Watch"}, VIDEO).socialbar is None


def test_socialbar_namespaced_options():
    server = ServerContext(host="example.com", request_uri="/videos/tour")
    options = build_options(
        {
            "socialbar": "facebook|embed",
            "socialbar:pageUrl": "share",
            "socialbar:tweetText": "Watch this",
            "socialbar:downloadType": "hd_mp4",
        },
        VIDEO,
        server,
    )
    socialbar = options.socialbar
    assert socialbar["buttons"] == ("facebook", "embed")
    assert socialbar["pageUrl"] == "http://example.com/videos/tour/share"
    assert socialbar["tweetText"] == "Watch this"
    assert socialbar["downloadType"] == "hd_mp4"


def test_analytics_requires_api_embed_type():
    assert build_options({"ga": "true", "type": "iframe"}, VIDEO).analytics is None
    assert build_options({"ga": "true"}, VIDEO).analytics is None
    assert build_options({"ga": "no", "type": "api"}, VIDEO).analytics is None
    assert build_options({"ga": "maybe", "type": "api"}, VIDEO).analytics is None


def test_analytics_group_for_api_embeds():
    options = build_options({"ga": "yes", "type": "api"}, VIDEO)
    ga = options.analytics
    assert ga["category"] == "Video"
    assert ga["playAction"] == "Play"
    assert ga["endAction"] == "Complete"
    assert ga["label"] == "Product Tour"
    assert ga["nonInteraction"] is False
    assert "value" not in ga


def test_analytics_explicit_values():
    options = build_options(
        {"ga": "y", "type": "api", "ga:label": "Homepage", "ga:value": "5", "ga:nonInteraction": "true"},
        VIDEO,
    )
    ga = options.analytics
    assert ga["label"] == "Homepage"
    assert ga["value"] == 5
    assert ga["nonInteraction"] is True


def test_analytics_label_reads_video_name():
    with pytest.raises(AttributeError):
        build_options({"ga": "yes", "type": "api"}, None)
    # no label needed, so no video needed
    assert build_options({"ga": "yes", "type": "api", "ga:label": "x"}, None).analytics["label"] == "x"


def test_secure_request_forces_ssl():
    secure = ServerContext(is_secure=True, host="example.com")
    assert build_options({"ssl": "false"}, VIDEO, secure).general["ssl"] is True
    assert build_options({"ssl": "false"}, VIDEO, ServerContext()).general["ssl"] is False
    assert build_options({"ssl": "true"}, VIDEO).general["ssl"] is True


def test_resolved_options_are_immutable():
    options = build_options({"socialbar": "embed"}, VIDEO)
    with pytest.raises(TypeError):
        options.general["ssl"] = True  # type: ignore[index]
    with pytest.raises(TypeError):
        options["general"] = {}  # type: ignore[index]


def test_as_dict_is_json_friendly():
    data = build_options({"socialbar": "embed|email"}, VIDEO).as_dict()
    assert data["socialbar"]["buttons"] == ["embed", "email"]
    data["general"]["ssl"] = True
    assert isinstance(data["general"], dict)


def test_resolving_twice_gives_equal_results():
    params = {"socialbar": "embed", "ga": "yes", "type": "api", "width": "320"}
    assert build_options(params, VIDEO).as_dict() == build_options(params, VIDEO).as_dict()
    assert build_options(params, VIDEO) == ResolvedOptions(build_options(params, VIDEO))


def test_value_retention_rules():
    assert is_kept_value(False)
    assert is_kept_value(0)
    assert not is_kept_value("")
    assert not is_kept_value(())
    assert not is_kept_value(None)


def test_option_lookup_keys():
    assert option_lookup_key("general", "videoWidth") == "videoWidth"
    assert option_lookup_key("socialbar", "buttons") == "socialbar"
    assert option_lookup_key("socialbar", "pageUrl") == "socialbar:pageUrl"
    assert option_lookup_key("ga", "label") == "ga:label"


def test_server_context_from_environ():
    ctx = ServerContext.from_environ(
        {"HTTPS": "on", "HTTP_HOST": "www.example.com", "PATH_INFO": "/videos", "QUERY_STRING": "p=2"}
    )
    assert ctx == ServerContext(is_secure=True, host="www.example.com", request_uri="/videos?p=2")
    plain = ServerContext.from_environ({"HTTPS": "off", "SERVER_NAME": "example.com", "REQUEST_URI": "/a"})
    assert plain.scheme == "http"
    assert plain.request_uri == "/a"
    assert ServerContext.from_environ({"wsgi.url_scheme": "https"}).is_secure is True


def test_hyphenated_multiselect_values_in_custom_schema():
    schema = parse_schema(
        {
            "general": {
                "formats": {"type": "multiselect", "default": "", "values": ["sd-mp4", "hd-mp4"]},
                "type": {"type": "list", "default": "iframe", "values": ["iframe"]},
            }
        }
    )
    options = build_options({"formats": "hd-mp4|sd-mp4"}, VIDEO, schema=schema)
    assert options.general["formats"] == ("hd-mp4", "sd-mp4")
    assert build_options({"formats": "sd-mp4"}, VIDEO, schema=schema).general["formats"] == ("sd-mp4",)


def test_blank_url_override_is_left_out():
    server = ServerContext(host="example.com", request_uri="/videos/tour")
    options = build_options({"socialbar": "embed", "socialbar:pageUrl": "   "}, VIDEO, server)
    assert "pageUrl" not in options.socialbar
