from __future__ import annotations

import argparse
import json
import sys
from contextlib import ExitStack
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from .config import load_config, resolve_runtime_secrets
from .errors import (
    ConfigError,
    InvalidPostIdError,
    MalformedPayloadError,
    UpstreamError,
)
from .export import post_to_json, write_post_files
from .ids import extract_post_id
from .normalize import normalize_post
from .offline import DirectoryPostFetcher, load_raw_post
from .pipeline import build_client, get_normalized_post
from .post import PostData
from .run_log import RunLogger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xpost")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser(
        "fetch",
        help="Fetch a post by ID or URL and print it normalized as JSON.",
    )
    fetch.add_argument("post", help="Post ID or status/article URL.")
    fetch.add_argument("--config", help="Path to YAML config file.")
    fetch.add_argument(
        "--max-quote-depth",
        type=int,
        default=None,
        help="Quote levels to resolve (default from config; 1 disables refetching).",
    )
    fetch.add_argument("--out", help="Write <id>.json and <id>.md under this directory.")
    fetch.add_argument(
        "--raw",
        action="store_true",
        help="Print the validated raw payload instead of the normalized post.",
    )
    fetch.add_argument(
        "--offline-dir",
        help="Read raw posts from <dir>/<id>.json instead of calling the API.",
    )
    fetch.add_argument("--log", help="Append JSONL diagnostics to this file.")
    fetch.set_defaults(_handler=_cmd_fetch)

    norm = subparsers.add_parser(
        "normalize",
        help="Normalize a saved raw post payload without network access.",
    )
    norm.add_argument("--input", required=True, help="Raw post or GraphQL envelope JSON file.")
    norm.add_argument("--out", help="Write <id>.json and <id>.md under this directory.")
    norm.set_defaults(_handler=_cmd_normalize)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _emit(post: PostData, out_dir: str | None) -> None:
    print(post_to_json(post))
    if out_dir:
        paths = write_post_files(post, out_dir)
        _eprint(f"json={paths.json_path}")
        _eprint(f"markdown={paths.markdown_path}")


def _cmd_fetch(args: argparse.Namespace) -> int:
    with ExitStack() as stack:
        log = (
            stack.enter_context(RunLogger.open(args.log, overwrite=False))
            if args.log
            else RunLogger.stderr()
        )
        log.info("fetch_command_started", post=args.post, offline_dir=args.offline_dir)

        try:
            cfg = load_config(args.config)
            post_id = extract_post_id(args.post)

            if args.offline_dir:
                fetcher = DirectoryPostFetcher(args.offline_dir)
            else:
                fetcher = stack.enter_context(
                    build_client(
                        cfg,
                        resolve_runtime_secrets(cfg),
                        on_retry=lambda ev: log.warning("http_retry", **asdict(ev)),
                    )
                )

            if args.raw:
                raw = fetcher.fetch_post(post_id)
                if raw is None:
                    _eprint(f"Post not found: {post_id}")
                    return 1
                print(json.dumps(raw.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
                return 0

            post = get_normalized_post(
                post_id,
                fetcher=fetcher,
                max_quote_depth=args.max_quote_depth,
                config=cfg,
                logger=log,
            )
            if post is None:
                log.info("fetch_command_completed", post_id=post_id, found=False)
                _eprint(f"Post not found: {post_id}")
                return 1

            _emit(post, args.out)
            log.info(
                "fetch_command_completed",
                post_id=post_id,
                found=True,
                kind=post.kind,
                quote_levels=len(post.quote_chain()),
            )
            return 0
        except Exception as e:
            log.exception("fetch_command_failed", exc=e)
            raise


def _cmd_normalize(args: argparse.Namespace) -> int:
    raw = load_raw_post(args.input)
    if raw is None:
        _eprint(f"No post in {args.input}")
        return 1

    post = normalize_post(raw)
    _emit(post, args.out)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except (ConfigError, InvalidPostIdError) as e:
        _eprint(str(e))
        return 2
    except (UpstreamError, MalformedPayloadError) as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
