from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from healthnav.domain.schemas.image_data import ImageData
from healthnav.domain.schemas.input_data import InputData

if TYPE_CHECKING:  # pragma: no cover
    import numpy as np


class Preprocess_text(ABC):
    @abstractmethod
    def normalize(self, text: str) -> str:
        pass


class Preprocess_cv(ABC):
    @abstractmethod
    def get_image(self, input: InputData) -> ImageData:
        pass

    @abstractmethod
    def _enhance_image(self, image: "np.ndarray") -> "np.ndarray":
        pass
