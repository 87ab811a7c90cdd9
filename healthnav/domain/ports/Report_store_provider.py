from abc import ABC, abstractmethod
from typing import List, Optional

from healthnav.domain.schemas.profile import UserProfile
from healthnav.domain.schemas.report import ReportRecord


class Report_store_provider(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        pass

    @abstractmethod
    def save_report(self, record: ReportRecord) -> ReportRecord:
        pass

    @abstractmethod
    def get_report(self, user_id: str, report_id: str) -> Optional[ReportRecord]:
        pass

    @abstractmethod
    def list_reports(self, user_id: str) -> List[ReportRecord]:
        """Return the user's reports, newest first."""
        pass
