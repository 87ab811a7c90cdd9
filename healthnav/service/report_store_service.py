from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, List, Optional

from healthnav.domain.ports.Report_store_provider import Report_store_provider
from healthnav.domain.schemas.profile import UserProfile
from healthnav.domain.schemas.report import ReportRecord
from healthnav.lib.logger import get_logger

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def _check_id(value: str, what: str = "user_id") -> str:
    if not _SAFE_ID_RE.match(value or ""):
        raise ValueError(f"invalid {what}: {value!r}")
    return value


class JsonFileReportStore(Report_store_provider):
    """Profiles and reports as JSON files under STORE_DIR (default: ./data).

    Layout:
      profiles/<user_id>.json
      reports/<user_id>/<report_id>.json
    """

    def __init__(self, root: Optional[str] = None) -> None:
        self.logger = get_logger("store")
        self.root = Path(root or os.getenv("STORE_DIR", "data"))

    def _profile_path(self, user_id: str) -> Path:
        return self.root / "profiles" / f"{_check_id(user_id)}.json"

    def _reports_dir(self, user_id: str) -> Path:
        return self.root / "reports" / _check_id(user_id)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        path = self._profile_path(user_id)
        if not path.exists():
            return None
        return UserProfile.model_validate_json(path.read_text(encoding="utf-8"))

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        path = self._profile_path(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(profile.model_dump_json(indent=2), encoding="utf-8")
        self.logger.info("profile saved: user=%s", user_id)
        return profile

    def save_report(self, record: ReportRecord) -> ReportRecord:
        folder = self._reports_dir(record.user_id)
        folder.mkdir(parents=True, exist_ok=True)
        (folder / f"{_check_id(record.id, 'report_id')}.json").write_text(
            record.model_dump_json(indent=2), encoding="utf-8"
        )
        self.logger.info("report saved: user=%s id=%s type=%s", record.user_id, record.id, record.report_type)
        return record

    def get_report(self, user_id: str, report_id: str) -> Optional[ReportRecord]:
        path = self._reports_dir(user_id) / f"{_check_id(report_id, 'report_id')}.json"
        if not path.exists():
            return None
        return ReportRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def list_reports(self, user_id: str) -> List[ReportRecord]:
        folder = self._reports_dir(user_id)
        if not folder.exists():
            return []
        records = [
            ReportRecord.model_validate_json(p.read_text(encoding="utf-8"))
            for p in folder.glob("*.json")
        ]
        return sorted(records, key=lambda r: r.uploaded_at, reverse=True)


class InMemoryReportStore(Report_store_provider):
    """Process-local store for tests and throwaway runs."""

    def __init__(self) -> None:
        self._profiles: Dict[str, UserProfile] = {}
        self._reports: Dict[str, Dict[str, ReportRecord]] = {}

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(_check_id(user_id))

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        self._profiles[_check_id(user_id)] = profile
        return profile

    def save_report(self, record: ReportRecord) -> ReportRecord:
        self._reports.setdefault(_check_id(record.user_id), {})[record.id] = record
        return record

    def get_report(self, user_id: str, report_id: str) -> Optional[ReportRecord]:
        return self._reports.get(_check_id(user_id), {}).get(report_id)

    def list_reports(self, user_id: str) -> List[ReportRecord]:
        records = self._reports.get(_check_id(user_id), {}).values()
        return sorted(records, key=lambda r: r.uploaded_at, reverse=True)
