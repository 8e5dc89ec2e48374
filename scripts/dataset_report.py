"""Load a studio dataset and print corpus statistics."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tts_studio.config import get_settings
from tts_studio.metrics import render_metrics
from tts_studio.services.factory import build_client
from tts_studio.store.dataset_store import DatasetStore
from tts_studio.store.stats import dataset_stats


async def run_report(server: Optional[str], fixture: Optional[Path], metrics: bool = False) -> int:
    settings = get_settings().model_copy()
    if server:
        settings.server_url = server
        settings.fixture_path = None
    if fixture:
        settings.fixture_path = str(fixture)
    client = build_client(settings)
    try:
        store = DatasetStore(client)
        snapshot = await store.wait_until_loaded()
    finally:
        await client.close()
    if snapshot is None:
        print(f"Dataset load failed: {store.load_error}", file=sys.stderr)
        return 1
    report = {
        "source_name": snapshot.source_name,
        "language": snapshot.language,
        "stats": dataset_stats(snapshot).as_dict(),
        "problems": snapshot.check_consistency(),
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    if metrics:
        payload, _ = render_metrics()
        sys.stderr.write(payload.decode("utf-8"))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print statistics for a TTS studio dataset.")
    parser.add_argument("--server", help="Studio API base URL (overrides TTS_STUDIO_SERVER_URL).")
    parser.add_argument(
        "--fixture",
        type=Path,
        help="Read the dataset from a local JSON file instead of the API.",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Write Prometheus metrics to stderr after the report.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run_report(args.server, args.fixture, args.metrics))


if __name__ == "__main__":
    sys.exit(main())
