from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from healthnav.domain.schemas.image_data import ImageData
from healthnav.domain.schemas.ocr_data import OCRData, OCRPage

if TYPE_CHECKING:  # pragma: no cover
    import numpy as np

ProgressCallback = Callable[[float], None]


class OCR_provider(ABC):
    @abstractmethod
    def get_text(self, data: ImageData, progress: Optional[ProgressCallback] = None) -> OCRData:
        """Recognize every page; `progress` receives fractions in [0.0, 1.0].

        Raises OCRError when the engine cannot process the images.
        """
        pass

    @abstractmethod
    def _extract_page(self, image: "np.ndarray", page_number: int) -> OCRPage:
        pass
