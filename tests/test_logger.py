from pathlib import Path
import json
import logging
import os
import subprocess
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wistiaembed.api.models import VideoRecord
from wistiaembed.exceptions import ApiError
from wistiaembed.params.builder import build_options
from wistiaembed.utils.logger import (
    JsonFormatter,
    KVFormatter,
    KVLogger,
    get_logger,
    log_exception,
    time_log,
)


def _record(msg: str, **kv) -> logging.LogRecord:
    record = logging.LogRecord("wistiaembed", logging.INFO, __file__, 1, msg, None, None)
    if kv:
        record.kv_pairs = kv
    return record


def test_kv_formatter_prefixes_pairs():
    line = KVFormatter().format(_record("Resolved", Type="api", Groups="general,ga"))
    assert line.endswith(" - INFO - [Type=api][Groups=general,ga] Resolved")


def test_json_formatter_merges_pairs():
    data = json.loads(JsonFormatter().format(_record("Resolved", Type="iframe")))
    assert data["message"] == "Resolved"
    assert data["level"] == "INFO"
    assert data["Type"] == "iframe"


def test_get_logger_is_a_kv_logger():
    logger = get_logger()
    assert isinstance(logger, KVLogger)
    assert logger.name == "wistiaembed"
    assert get_logger() is logger


def test_log_exception_walks_the_cause_chain(caplog):
    try:
        try:
            raise ValueError("bad json")
        except ValueError as inner:
            raise ApiError("Could not access the remote file", 3) from inner
    except ApiError as e:
        with caplog.at_level(logging.ERROR, logger="wistiaembed"):
            log_exception(e)

    messages = [r.getMessage() for r in caplog.records]
    assert messages == [
        "ApiError: Wistia Error: Could not access the remote file (Code: 3)",
        "caused by ValueError: bad json",
    ]


def test_time_log_reports_duration(caplog):
    logger = get_logger()

    @time_log(logger)
    def work():
        return 5

    with caplog.at_level(logging.DEBUG, logger="wistiaembed"):
        assert work() == 5
    record = next(r for r in caplog.records if "Finished: work" in r.getMessage())
    assert record.kv_pairs["Function"] == "work"


def test_plain_logger_from_host_is_upgraded():
    existing = logging.getLogger("wistiaembed")
    existing.__class__ = logging.Logger
    try:
        assert get_logger() is existing
        assert isinstance(existing, KVLogger)
        options = build_options({}, VideoRecord.stub("abc123xyz"))
        assert options.general["videoWidth"] == 640
    finally:
        existing.__class__ = KVLogger


def test_logger_configured_before_import(tmp_path: Path):
    script = (
        "import logging\n"
        "logging.getLogger('wistiaembed').setLevel(logging.DEBUG)\n"
        "from wistiaembed import build_options, render_embed, VideoRecord\n"
        "video = VideoRecord.stub('abc123xyz')\n"
        "print(render_embed(video, build_options({}, video))[:7])\n"
    )
    env = dict(os.environ, PYTHONPATH=str(ROOT))
    result = subprocess.run(
        [sys.executable, "-c", script],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "<iframe"
