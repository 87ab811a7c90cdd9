from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pytest

from healthnav.domain.errors import AssistantError, AssistantErrorKind, OCRError
from healthnav.domain.ports.Assistant_provider import Assistant_provider
from healthnav.domain.ports.OCR_provider import OCR_provider, ProgressCallback
from healthnav.domain.ports.Preprocess_provider import Preprocess_cv
from healthnav.domain.schemas.image_data import ImageData, ImagePage
from healthnav.domain.schemas.input_data import InputData
from healthnav.domain.schemas.ocr_data import OCRData, OCRLine, OCRPage
from healthnav.service.pipeline_service import PipelineService
from healthnav.service.report_store_service import InMemoryReportStore

BLOOD_REPORT_TEXT = """
HAEMATOLOGY  COMPLETE BLOOD COUNT
Haemoglobin 13.5 g/dL
Total Leukocyte Count 7200 cumm
Neutrophils 60 %
Lymphocytes 30 %
Eosinophils 4 %
Monocytes 5 %
Basophis 1 %
Absolute Neutrophils 4.32
Absolute Lymphocytes 2:16
Platelet Count 2.5 lakhs/cumm
MCV 88.2 fL
"""

NUTRITION_LABEL_TEXT = """
Nutrition Facts
Serving size 1 cup (228g)
Amount per serving
Calories 230
Total Fat 8g
Saturated Fat 1g
Trans Fat Og
Cholesterol 0mg
Sodium 160mg
Total Carbohydrate 37g
Dietary Fiber 4g
Total Sugars 12g
Protein 3g
"""


def ocr_data_from_text(text: str) -> OCRData:
    lines: List[OCRLine] = []
    for i, row in enumerate(ln for ln in text.splitlines() if ln.strip()):
        top = 20 + i * 30
        lines.append(OCRLine(text=row.strip(), bbox=[10, top, 400, top + 20], conf=0.95))
    return OCRData(language="en", pages=[OCRPage(num=1, width=800, height=1200, lines=lines)])


class FakeOCR(OCR_provider):
    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.progress_seen: List[float] = []

    def get_text(self, data: ImageData, progress: Optional[ProgressCallback] = None) -> OCRData:
        if self.error is not None:
            raise self.error
        for fraction in (0.0, 1.0):
            self.progress_seen.append(fraction)
            if progress:
                progress(fraction)
        return ocr_data_from_text(self.text)

    def _extract_page(self, image, page_number: int) -> OCRPage:
        return OCRPage(num=page_number)


class FakeAssistant(Assistant_provider):
    def __init__(self, reply: str = "Based on extracted values: all good.", error: Optional[AssistantError] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakePreprocess(Preprocess_cv):
    def get_image(self, input: InputData) -> ImageData:
        return ImageData(pages=[ImagePage(content=input.document.data)], source=input.document.filename)

    def _enhance_image(self, image):
        return image


def make_pipeline(
    text: str = BLOOD_REPORT_TEXT,
    assistant: Optional[FakeAssistant] = None,
    ocr_error: Optional[Exception] = None,
) -> Tuple[PipelineService, FakeOCR, FakeAssistant, InMemoryReportStore]:
    ocr = FakeOCR(text, error=ocr_error)
    assistant = assistant or FakeAssistant()
    store = InMemoryReportStore()
    pipeline = PipelineService(ocr=ocr, assistant=assistant, store=store, preprocess=FakePreprocess())
    return pipeline, ocr, assistant, store


@pytest.fixture
def pipeline_parts():
    return make_pipeline()


@pytest.fixture
def rate_limited_assistant() -> FakeAssistant:
    return FakeAssistant(error=AssistantError(AssistantErrorKind.RATE_LIMITED, "[429] Resource exhausted"))


@pytest.fixture
def broken_ocr_error() -> OCRError:
    return OCRError("engine crashed")
