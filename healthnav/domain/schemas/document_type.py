from enum import Enum


class DocumentType(str, Enum):
    BLOOD_REPORT = "blood_report"
    NUTRITION_LABEL = "nutrition_label"

    @property
    def report_type(self) -> str:
        """Human readable label stored alongside saved reports."""
        return "Blood Report" if self is DocumentType.BLOOD_REPORT else "Nutrition Label"
