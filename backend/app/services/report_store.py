"""Report store: persists detection results as `narratives.json`.

- The same document is written to every configured output dir
  (`data/` for the pipeline history, `public/data/` for the dashboard).
- Reads go to the first dir that has a report.
- Writes are atomic per file (temp file + replace).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from derive.core.aggregation import DetectionResult, Narrative


logger = logging.getLogger("solradar.report")

REPORT_FILENAME = "narratives.json"

TREND_UP_THRESHOLD = 0.6
TREND_DOWN_THRESHOLD = 0.3


def trend_direction(narratives: Sequence[Narrative]) -> str:
    """Overall direction from mean confidence."""
    if not narratives:
        return "flat"
    avg = sum(n.confidence for n in narratives) / len(narratives)
    if avg > TREND_UP_THRESHOLD:
        return "up"
    if avg < TREND_DOWN_THRESHOLD:
        return "down"
    return "flat"


def build_document(result: DetectionResult) -> dict[str, Any]:
    return {
        "timestamp": result.timestamp,
        "totalNarratives": len(result.narratives),
        "trending": trend_direction(result.narratives),
        "narratives": [n.to_dict() for n in result.narratives],
    }


class ReportStore:
    def __init__(self, output_dirs: Iterable[Path]) -> None:
        self.output_dirs = [Path(d) for d in output_dirs]
        if not self.output_dirs:
            raise ValueError("ReportStore requires at least one output dir")

    def save(self, result: DetectionResult) -> list[Path]:
        document = build_document(result)
        body = json.dumps(document, indent=2, ensure_ascii=False)
        written: list[Path] = []
        for d in self.output_dirs:
            d.mkdir(parents=True, exist_ok=True)
            target = d / REPORT_FILENAME
            tmp = target.with_suffix(".json.tmp")
            tmp.write_text(body, encoding="utf-8")
            os.replace(tmp, target)
            written.append(target)
            logger.info(json.dumps({"event": "report_saved", "path": str(target)}))
        return written

    def load_latest(self) -> Optional[dict[str, Any]]:
        for d in self.output_dirs:
            path = d / REPORT_FILENAME
            if not path.is_file():
                continue
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Unreadable report {path}: {e}")
        return None
