from __future__ import annotations

"""Detection entry point: collect -> extract -> aggregate -> save report.

Commands:
  once  (default) run one detection and write narratives.json to every output dir
  test            run each collector once and log what it returned

Scheduling is external (cron); every invocation is an independent run.

Run:
  python backend/app/jobs/run_detection.py once
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

# Ensure `backend/` is on sys.path so `import app...` works when run from repo root.
BASE_DIR = Path(__file__).resolve().parents[2]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from app.core.config import get_settings  # noqa: E402
from app.jobs.pipeline import NarrativePipeline, build_collectors  # noqa: E402
from app.services.report_store import ReportStore  # noqa: E402
from derive.core.aggregation import DetectionResult  # noqa: E402
from ingestion.core.source_registry import load_sources_yaml  # noqa: E402


logger = logging.getLogger("solradar.detection")


def _log(event: dict) -> None:
    # Structured logs only; never log raw content.
    logger.info(json.dumps(event, ensure_ascii=False))


def format_summary(result: DetectionResult) -> str:
    lines = []
    for n in result.narratives:
        pct = round(n.confidence * 100)
        filled = pct // 10
        bar = "█" * filled + "░" * (10 - filled)
        src = n.data_sources
        lines.append(f"{bar} {pct:>3}% - {n.name:<20} [H:{src.helius} G:{src.github} S:{src.social}]")
    return "\n".join(lines)


def cmd_once() -> int:
    settings = get_settings()
    registry = load_sources_yaml(settings.sources_yaml)
    pipeline = NarrativePipeline(*build_collectors(settings, registry))

    result = asyncio.run(pipeline.run())
    paths = ReportStore(settings.output_dirs).save(result)

    print(format_summary(result))
    _log({"event": "detection_complete", "narratives": len(result.narratives), "paths": [str(p) for p in paths]})
    return 0


def cmd_test() -> int:
    settings = get_settings()
    registry = load_sources_yaml(settings.sources_yaml)
    helius, github, social = build_collectors(settings, registry)

    onchain = helius.collect()
    _log(
        {
            "event": "collector_test",
            "source": "helius",
            "slot": onchain.get("slot", 0),
            "block_height": onchain.get("blockHeight", 0),
            "tx_count": onchain["transactionVolume"]["txCount"],
            "tx_per_second": onchain["transactionVolume"]["txPerSecond"],
            "volume_spike": onchain["transactionVolume"]["volumeSpike"],
            "token_transfers": len(onchain["tokenTransfers"]),
            "nft_events": len(onchain["nftEvents"]),
            "program_interactions": len(onchain["programInteractions"]),
        }
    )

    repos = github.collect()
    _log(
        {
            "event": "collector_test",
            "source": "github",
            "trending_repos": len(repos["trendingRepos"]),
            "new_repos": len(repos["newRepos"]),
        }
    )

    posts = social.collect()
    keywords = sorted({k for p in posts for k in p.get("keywords", [])})
    _log({"event": "collector_test", "source": "social", "posts": len(posts), "keywords": keywords})
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Solana narrative detection")
    parser.add_argument("command", nargs="?", choices=("once", "test"), default="once")
    args = parser.parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        return cmd_test() if args.command == "test" else cmd_once()
    except Exception:  # noqa: BLE001
        logger.exception("Detection failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
