#!/usr/bin/env python3
"""Query a live update API the way the host would.

Configuration is read from ``REMOTE_UPDATER_*`` environment variables
(see ``UpdaterConfig.from_env``); command-line flags override them.

Default behavior:
1) plugin_latest_version, reporting whether an update would be offered,
2) plugin_information with ``--details``.
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

from remote_updater import FilterRegistry, RemoteUpdater, UpdaterConfig  # noqa: E402
from remote_updater._constants import ACTION_INFORMATION, ACTION_LATEST_VERSION  # noqa: E402
from remote_updater.versioning import is_newer  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query a custom plugin update API")
    parser.add_argument("--api-url", help="Update API URL")
    parser.add_argument("--plugin-file", help="Path to the plugin's main file")
    parser.add_argument("--version", dest="plugin_version", help="Installed plugin version")
    parser.add_argument("--key", help="License key")
    parser.add_argument("--product", help="Product id")
    parser.add_argument("--verify-ssl", action="store_true", help="Verify the API's TLS certificate")
    parser.add_argument("--details", action="store_true", help="Also request plugin_information")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.plugin_file:
        overrides["plugin_file"] = args.plugin_file
    if args.verify_ssl:
        overrides["verify_ssl"] = True

    api_data = {
        name: value
        for name, value in (("version", args.plugin_version), ("key", args.key), ("product", args.product))
        if value
    }
    if api_data:
        overrides["api_data"] = api_data
    return overrides


async def _run(args: argparse.Namespace) -> int:
    config = UpdaterConfig.from_env(**_overrides(args))

    async with RemoteUpdater(config, FilterRegistry()) as updater:
        identity = updater.identity
        print(f"slug={identity.slug} full_id={identity.full_id} installed={identity.current_version}")

        actions = [ACTION_LATEST_VERSION]
        if args.details:
            actions.append(ACTION_INFORMATION)

        status = 0
        for action in actions:
            check = await updater.client.check_remote(action, {"slug": identity.slug})
            if check is None or check.info is None:
                print(f"{action}: FAILED ({check.error if check else 'not applicable'})")
                status = 1
                continue
            print(f"{action}: {json.dumps(check.info.model_dump(), indent=2)}")
            if action == ACTION_LATEST_VERSION:
                offered = is_newer(identity.current_version, check.info.new_version)
                print(f"update offered: {'yes' if offered else 'no'}")
        return status


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
