"""Command-line entry point.

Example::

    arbflow --provider openai --model gpt-4o-mini \
        --arbs-folder lib/l10n --files lib/main.dart lib/home.dart
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx
from pydantic import ValidationError

from arbflow.core.config import Settings
from arbflow.core.errors import ArbflowError, ConfigurationError
from arbflow.core.types import FileStatus
from arbflow.llm.client import create_llm_client
from arbflow.llm.health import check_llm_health
from arbflow.pipeline.processor import L10nProcessor

logger = logging.getLogger("arbflow")

_KEYLESS_PROVIDERS = {"ollama"}

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="arbflow",
        description="Extract Flutter strings into ARB files and translate them with an LLM.",
    )
    parser.add_argument("--provider", help="LLM provider (openai, mistral, google, ollama).")
    parser.add_argument("--model", help="Model name to use.")
    parser.add_argument("--api-key", help="API key for the LLM provider.")
    parser.add_argument("--base-url", help="Override the provider's API base URL.")
    parser.add_argument("--arbs-folder", help="Directory of .arb localization files.")
    parser.add_argument("--files", nargs="+", help="Flutter files to process.")
    parser.add_argument("--prompts-dir", help="Directory holding <name>.sys/<name>.hum templates.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...).")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check that the LLM provider is reachable before running.",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Load settings from the environment and apply CLI overrides."""
    settings = Settings()
    llm_overrides = {
        "provider": args.provider,
        "model": args.model,
        "api_key": args.api_key,
        "base_url": args.base_url,
    }
    l10n_overrides = {
        "arbs_folder": args.arbs_folder,
        "files": args.files,
        "prompts_dir": args.prompts_dir,
    }
    settings.llm = settings.llm.model_copy(
        update={k: v for k, v in llm_overrides.items() if v is not None}
    )
    settings.l10n = settings.l10n.model_copy(
        update={k: v for k, v in l10n_overrides.items() if v is not None}
    )
    if args.log_level:
        settings.log_level = args.log_level
    return settings


async def run(settings: Settings, check: bool = False) -> int:
    llm = settings.llm
    if llm.provider.lower() not in _KEYLESS_PROVIDERS and not llm.resolved_api_key():
        raise ConfigurationError(
            f"No API key for provider {llm.provider!r}: pass --api-key or set "
            f"{llm.provider.upper()}_API_KEY"
        )

    if check:
        status = await check_llm_health(llm)
        if not status.healthy:
            logger.error("LLM provider %s is not reachable: %s", llm.provider, status.details)
            return 1
        logger.info("LLM provider %s reachable (%.0f ms)", llm.provider, status.latency_ms or 0)

    client = create_llm_client(llm)
    try:
        report = await L10nProcessor(client, settings.l10n).process()
    finally:
        await client.close()

    return 1 if report.files_with_status(FileStatus.FAILED) else 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        settings = build_settings(args)
    except ValidationError as exc:
        logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)
    logging.basicConfig(level=settings.log_level.upper(), format=_LOG_FORMAT)

    try:
        code = asyncio.run(run(settings, check=args.check))
    except (ArbflowError, OSError, UnicodeDecodeError, httpx.HTTPError) as exc:
        logger.error("%s", exc)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
