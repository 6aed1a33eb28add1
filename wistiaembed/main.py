"""コマンドラインから埋め込みオプションの解決とマークアップ生成を行うエントリポイント。"""

import argparse
import json
import sys
import traceback
from dataclasses import replace
from typing import List, Optional, Sequence

from wistiaembed.api.models import VideoRecord
from wistiaembed.config import load_settings
from wistiaembed.config.settings import Settings
from wistiaembed.exceptions import ApiError, ConfigurationError, ValidationError
from wistiaembed.params.builder import ResolvedOptions, build_options
from wistiaembed.params.resolver import Overrides
from wistiaembed.render.registry import render_embed
from wistiaembed.utils.logger import (
    KVLogger,
    get_logger,
    log_exception,
    setup_logging,
    shutdown_logging,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wistiaembed",
        description="Resolve Wistia embed options and render embed markup.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML settings file (api_key, projects, timeout, ...).",
    )
    parser.add_argument(
        "--https",
        action="store_true",
        help="Treat the request as secure. Forces ssl=true on every embed.",
    )
    parser.add_argument("--host", type=str, default=None, help="Host used to absolutize relative URLs.")
    parser.add_argument(
        "--request-uri",
        type=str,
        default=None,
        help="Current page path used to absolutize relative URLs.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="If set, outputs logs in machine-readable JSON format.",
    )
    parser.add_argument(
        "--log-kv",
        action="store_true",
        help="If set, outputs logs in human-readable Key-Value pair format.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("options", "Print the resolved options as JSON."),
        ("embed", "Print the embed markup."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("video_id", type=str, help="Wistia media ID (or hashed ID with --offline).")
        cmd.add_argument(
            "-p",
            "--param",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help='Template parameter, e.g. -p type=api -p "socialbar=embed|twitter". Repeatable.',
        )
        cmd.add_argument(
            "--offline",
            type=str,
            default=None,
            metavar="NAME",
            help="Skip the API and render a stub video with this display name.",
        )

    sub.add_parser("videos", help="List videos of the configured projects.")
    return parser


def _apply_server_flags(settings: Settings, args: argparse.Namespace) -> Settings:
    server = settings.server
    if args.https:
        server = replace(server, is_secure=True)
    if args.host is not None:
        server = replace(server, host=args.host)
    if args.request_uri is not None:
        server = replace(server, request_uri=args.request_uri)
    return replace(settings, server=server)


def _resolve(settings: Settings, args: argparse.Namespace) -> "tuple[VideoRecord, ResolvedOptions]":
    schema = settings.load_schema()
    if args.offline is not None:
        video = VideoRecord.stub(args.video_id, args.offline)
    else:
        with settings.create_client() as client:
            video = client.get_video(args.video_id)
    overrides = Overrides.from_pairs(args.param)
    return video, build_options(overrides, video, settings.server, schema)


def _list_videos(settings: Settings) -> List[str]:
    lines: List[str] = []
    if not settings.projects:
        return lines
    with settings.create_client() as client:
        for project, value, label in client.video_choices(settings.projects, progress=True):
            lines.append(f"{project}\t{value}\t{label}")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    """コマンドライン引数を解析し、結果を標準出力に書き出す。"""
    args = build_parser().parse_args(argv)

    setup_logging(log_json=args.log_json, log_kv=args.log_kv, debug_mode=args.debug)
    logger: KVLogger = get_logger()

    try:
        settings = _apply_server_flags(load_settings(args.config), args)
        if args.command == "videos":
            lines = _list_videos(settings)
            if not lines:
                logger.warning("No videos found. Did you configure any projects?")
            for line in lines:
                print(line)
        else:
            video, options = _resolve(settings, args)
            if args.command == "options":
                print(json.dumps(options.as_dict(), indent=2, ensure_ascii=False))
            else:
                print(render_embed(video, options))
        return 0
    except ValidationError as e:
        logger.kv_error(
            f"Validation Error: {e.message}",
            kv_pairs={
                "Event": "ValidationError",
                "Message": e.message,
                "Line": e.line_number,
                "Column": e.column_number,
            },
        )
        return 1
    except ConfigurationError as e:
        logger.kv_error(str(e), kv_pairs={"Event": "ConfigurationError", "Message": e.message})
        return 1
    except ApiError as e:
        log_exception(e, logger)
        return 1
    except Exception as e:
        logger.kv_error(
            f"An unexpected error occurred: {e}",
            kv_pairs={
                "Event": "UnexpectedError",
                "Message": str(e),
                "Traceback": traceback.format_exc(),
            },
        )
        return 1
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
