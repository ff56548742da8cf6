#!/usr/bin/env python3
"""
Demo Runner for the API sandbox.

Runs one catalog API through a SandboxSession and prints the result and the
run history as JSON.

Usage:
    # List catalog APIs
    python -m scripts.demo_run --list

    # Live call
    python -m scripts.demo_run cat-facts

    # Key-gated API without a key (mock short-circuit)
    python -m scripts.demo_run openweathermap

    # With a key, through the CORS relay
    python -m scripts.demo_run openweathermap --key "$OWM_KEY" --proxy

    # Custom mock body
    python -m scripts.demo_run cat-facts --mock-body '{"fact": "edited"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from api_sandbox.catalog import default_catalog, load_catalog
from api_sandbox.config import configure_logging, get_settings
from api_sandbox.sandbox_types import SandboxError
from api_sandbox.session import SandboxSession

logger = logging.getLogger("demo_run")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a catalog API through the sandbox")
    parser.add_argument("api_id", nargs="?", help="Catalog id (e.g. cat-facts)")
    parser.add_argument("--list", action="store_true", help="List catalog APIs and exit")
    parser.add_argument("--catalog", help="Path to a catalog JSON file")
    parser.add_argument("--key", help="API key to inject")
    parser.add_argument("--proxy", action="store_true", help="Route through the CORS relay")
    parser.add_argument("--mock-body", help="Run in mock mode with this JSON body")
    parser.add_argument("--repeat", type=int, default=1, help="Run N times to build history")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def run_demo(args: argparse.Namespace) -> int:
    settings = get_settings()
    path = args.catalog or settings.catalog_path
    catalog = load_catalog(path) if path else default_catalog()

    if args.list or not args.api_id:
        for category, apis in catalog.categories().items():
            print(f"{category}:")
            for api in apis:
                lock = " [key]" if api.auth_required else ""
                print(f"  {api.id:<20} {api.display_name}{lock}")
        return 0

    session = SandboxSession(settings=settings)
    session.select_api(catalog[args.api_id])

    session.options.credential = args.key
    session.options.proxy_enabled = args.proxy
    if args.mock_body is not None:
        session.options.mock_mode_enabled = True
        session.options.editable_mock_body = args.mock_body

    for _ in range(max(1, args.repeat)):
        result = await session.run()
        logger.info(f"{result.source.value} → {result.status_code} ({result.duration_ms}ms)")

    if session.suggest_proxy:
        logger.warning("No response received; try again with --proxy")

    print(json.dumps(session.state(), indent=2, ensure_ascii=False))
    return 0 if session.last_result and session.last_result.success else 1


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    try:
        return asyncio.run(run_demo(args))
    except SandboxError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
