from __future__ import annotations

from typing import Optional

from healthnav.domain.ports.OCR_provider import OCR_provider, ProgressCallback
from healthnav.domain.schemas.image_data import ImageData
from healthnav.domain.schemas.ocr_data import OCRData
from healthnav.lib.logger import get_logger


class OCRService:
    """High-level OCR service; RapidOCR unless a provider is injected."""

    def __init__(self, provider: Optional[OCR_provider] = None) -> None:
        logger = get_logger("ocr")
        if provider is not None:
            self.provider = provider
        else:
            from healthnav.local_ai_models.ocr import RapidOCRProvider

            self.provider = RapidOCRProvider()
            logger.info("OCR provider: RapidOCR")

    def run(self, images: ImageData, progress: Optional[ProgressCallback] = None) -> OCRData:
        return self.provider.get_text(images, progress)
