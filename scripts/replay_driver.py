#!/usr/bin/env python3
"""Replay recorded driver positions against a TMS backend.

Reads a JSON file holding a list of fixes (``latitude``/``longitude`` plus
optional ``accuracy``, ``timestamp``, ``speed``, ``heading``), turns
location sharing on, and publishes one fix per interval until the list is
exhausted.

Configuration comes from ``TMS_*`` environment variables (see
``TmsConfig.from_env``); command line flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from tmslocation import (  # noqa: E402
    LocationError,
    LocationFix,
    ReplayLocationSource,
    TmsConfig,
    TmsLocationApp,
)


def _load_fixes(path: Path) -> list[LocationFix]:
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise SystemExit(f"{path} must contain a JSON list of fixes")
    return [LocationFix.model_validate(item) for item in raw]


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.interval is not None:
        overrides["update_interval"] = args.interval
    if args.storage:
        overrides["storage_path"] = str(args.storage)
    config = TmsConfig.from_env(**overrides)

    source = ReplayLocationSource(_load_fixes(args.fixes))
    async with TmsLocationApp(config, source=source, driver_id=args.driver_id) as app:
        try:
            await app.controller.start()
        except LocationError as exc:
            print(f"Could not start sharing: {exc}", file=sys.stderr)
            return 1

        while app.state.is_sharing:
            await asyncio.sleep(config.update_interval / 2)
            snapshot = app.state.read()
            print(f"sharing={snapshot.is_sharing} last_update={snapshot.last_update}")

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("fixes", type=Path, help="JSON file with recorded positions")
    parser.add_argument("--driver-id", required=True)
    parser.add_argument("--base-url")
    parser.add_argument("--interval", type=float)
    parser.add_argument("--storage", type=Path, help="JSON file persisting the sharing flag")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
