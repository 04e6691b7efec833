"""
Report persistence on the local filesystem.

    {base_dir}/{report_id}/report.json
    {base_dir}/{report_id}/screenshots/{name}.png

report.json holds the metadata, the five-category scores and breakdowns,
the facts, the suggestions and references to the screenshot files. The
screenshot bytes themselves are never written into the JSON.
"""
from __future__ import annotations

import json
import logging
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from config import DEFAULT_OUTPUT_DIR, REPORT_VERSION
from models import AuditResult, to_dict


logger = logging.getLogger(__name__)

REPORT_FILE = "report.json"
SCREENSHOT_DIR = "screenshots"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReportStorage:
    def __init__(self, base_dir: str = DEFAULT_OUTPUT_DIR):
        self.base_dir = Path(base_dir)

    # ── Paths ─────────────────────────────────────────────────────────────────

    def report_dir(self, report_id: str) -> Path:
        return self.base_dir / report_id

    def report_path(self, report_id: str) -> Path:
        return self.report_dir(report_id) / REPORT_FILE

    def screenshot_path(self, report_id: str, name: str) -> Path:
        return self.report_dir(report_id) / SCREENSHOT_DIR / f"{name}.png"

    # ── Read / write ──────────────────────────────────────────────────────────

    def save(
        self,
        result: AuditResult,
        url: Optional[str] = None,
        created_at: Optional[str] = None,
    ) -> str:
        """Write the report and its screenshots; returns the new report id."""
        report_id = uuid.uuid4().hex
        shots_dir = self.report_dir(report_id) / SCREENSHOT_DIR
        shots_dir.mkdir(parents=True, exist_ok=True)

        completed_at = _now()
        stored = {
            "metadata": {
                "id": report_id,
                "url": url or result.url,
                "status": "completed",
                "created_at": created_at or completed_at,
                "completed_at": completed_at,
                "version": REPORT_VERSION,
            },
            "scores": to_dict(result.new_scores),
            "score_breakdowns": to_dict(result.score_breakdowns),
            "facts": to_dict(result.facts),
            "suggestions": to_dict(result.suggestions),
            "assets": {
                "screenshots": [
                    {
                        "name": s.name,
                        "width": s.width,
                        "height": s.height,
                        "path": f"{SCREENSHOT_DIR}/{s.name}.png",
                    }
                    for s in result.screenshots
                ],
            },
        }

        self.report_path(report_id).write_text(json.dumps(stored, indent=2), encoding="utf-8")
        for shot in result.screenshots:
            self.screenshot_path(report_id, shot.name).write_bytes(shot.data)

        logger.info("Saved report %s for %s", report_id, stored["metadata"]["url"])
        return report_id

    def load(self, report_id: str) -> Optional[dict]:
        path = self.report_path(report_id)
        if not path.is_file():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def load_screenshot(self, report_id: str, name: str) -> Optional[bytes]:
        path = self.screenshot_path(report_id, name)
        return path.read_bytes() if path.is_file() else None

    def delete(self, report_id: str) -> bool:
        target = self.report_dir(report_id)
        if not target.is_dir():
            return False
        shutil.rmtree(target)
        return True

    def list_ids(self) -> list[str]:
        if not self.base_dir.is_dir():
            return []
        return [p.parent.name for p in self.base_dir.glob(f"*/{REPORT_FILE}")]

    def list_reports(self) -> list[dict]:
        """Metadata of every stored report, newest first."""
        reports = []
        for report_id in self.list_ids():
            stored = self.load(report_id)
            if stored and "metadata" in stored:
                reports.append(stored["metadata"])
        reports.sort(key=lambda m: m.get("created_at") or "", reverse=True)
        return reports
