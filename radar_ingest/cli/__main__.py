from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from radar_ingest.auth.consent import EnvTokenConsentProvider
from radar_ingest.config.loader import ConfigError, RadarConfig, load_config
from radar_ingest.logging.error_log import ErrorLogBuffer
from radar_ingest.logging.init import log_summary, setup_logging
from radar_ingest.models.classified_error import ErrorKind
from radar_ingest.models.load_result import LoadPhase, LoadResult
from radar_ingest.models.source import SourceType
from radar_ingest.services.messages import render_error_message
from radar_ingest.services.pipeline import RadarPipeline
from radar_ingest.services.summary import render_summary_line
from radar_ingest.sources.fetcher import FetchError, HttpFetcher
from radar_ingest.sources.parsing import DocumentParseError, parse_csv, parse_json
from radar_ingest.sources.resolver import locator_for, resolve_source

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment), then config
- Resolve the locator and run one load through RadarPipeline
- Print the SUMMARY line; append classified errors to logs/errors-*.log

A bare URL / sheet id is accepted as well as a full page locator
("?documentId=...&sheetName=...").
"""

EXIT_READY = 0
EXIT_FATAL = 1
EXIT_LOAD_FAILED = 2

DEFAULT_CONFIG_PATH = Path("config/radar.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build a tech radar from a CSV, JSON or Google Sheet source")
    p.add_argument("locator", nargs="?", default=None, help="Page locator, document URL or sheet id")
    p.add_argument("--sheet-name", default=None, help="Tab to load (Google Sheets only)")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/radar.yml if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print parsed headers & first rows then exit")
    p.add_argument(
        "--access-token-env",
        default="GOOGLE_ACCESS_TOKEN",
        help="Environment variable holding the OAuth token used for interactive consent",
    )
    return p.parse_args(argv)


def _normalize_locator(locator: str | None, sheet_name: str | None) -> str | None:
    if not locator:
        return None
    if "documentId=" in locator or "sheetId=" in locator:
        return locator
    return locator_for(locator, sheet_name)


async def _inspect_data(cfg: RadarConfig, locator: str | None) -> int:
    descriptor = resolve_source(locator, cfg)
    if descriptor.source_type not in (SourceType.CSV, SourceType.JSON):
        print(f"inspect: only csv/json sources are supported (got {descriptor.source_type.value})")
        return EXIT_FATAL

    async with HttpFetcher(timeout_seconds=cfg.http_timeout_seconds) as fetcher:
        try:
            response = await fetcher.fetch(descriptor.document_id or "")
        except FetchError as e:
            print(f"inspect: fetch_error: {e}")
            return EXIT_LOAD_FAILED
    if not response.ok:
        print(f"inspect: HTTP {response.status}")
        return EXIT_LOAD_FAILED

    parse = parse_csv if descriptor.source_type is SourceType.CSV else parse_json
    try:
        rows = parse(response.text)
    except DocumentParseError as e:
        print(f"inspect: parse_error: {e}")
        return EXIT_LOAD_FAILED

    print(f"FILE: {descriptor.document_id}")
    print(f"  cols={list(rows[0].keys()) if rows else []}")
    print("  sample_rows=", rows[:3])
    return EXIT_READY


async def _run(cfg: RadarConfig, locator: str | None, token_env: str) -> tuple[LoadResult, str | None]:
    """Load once; also return the account that granted the token, if any."""
    async with RadarPipeline(cfg, consent_provider=EnvTokenConsentProvider(token_env)) as pipeline:
        result = await pipeline.load(locator)
        return result, pipeline.auth_session.email


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    locator = _normalize_locator(args.locator, args.sheet_name)

    if args.inspect_data:
        return asyncio.run(_inspect_data(cfg, locator))

    result, email = asyncio.run(_run(cfg, locator, args.access_token_env))

    if result.error is not None:
        presented = render_error_message(result.error, email)
        logger.error(presented.message)
        if presented.faq:
            logger.info(presented.faq)
        if presented.switch_account:
            logger.info(f"switch account: export a token for another account in {args.access_token_env} and rerun")
        error_log = ErrorLogBuffer()
        error_log.append(result.error)
        try:
            path = error_log.flush()
            logger.debug(f"error log written to {path}")
        except OSError as e:
            logger.warning(f"failed to write error log: {e}")
    elif result.phase is LoadPhase.AWAITING_INPUT:
        logger.info("no radar source given: pass a CSV/JSON URL or a Google Sheet URL")

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.phase is LoadPhase.READY:
        return EXIT_READY
    if result.error is not None and result.error.kind is ErrorKind.INVALID_CONFIG:
        return EXIT_FATAL
    return EXIT_LOAD_FAILED


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
