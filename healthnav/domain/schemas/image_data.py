from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from healthnav.domain.errors import UnreadableImageError


class ImagePage(BaseModel):
    """Single photographed page, kept as encoded bytes and/or a decoded matrix."""

    content: Optional[bytes] = None  # encoded image bytes (PNG/JPEG/etc.)
    width: Optional[int] = None
    height: Optional[int] = None
    array: Optional[Any] = Field(default=None, exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def ensure_array(self) -> Any:
        """Return a decoded numpy matrix, decoding the bytes lazily when required."""

        if self.array is not None:
            return self.array
        if not self.content:
            raise UnreadableImageError("image page does not contain encoded bytes to decode")

        import cv2
        import numpy as np

        matrix = cv2.imdecode(np.frombuffer(self.content, dtype=np.uint8), cv2.IMREAD_COLOR)
        if matrix is None:
            raise UnreadableImageError("failed to decode image bytes")

        self.set_array(matrix)
        return matrix

    def set_array(self, matrix: Any) -> None:
        self.array = matrix
        if matrix is not None:
            self.height, self.width = matrix.shape[:2]
        else:
            self.height = None
            self.width = None


class ImageData(BaseModel):
    """Collection of preprocessed image pages passed to OCR."""

    pages: List[ImagePage] = Field(default_factory=list)
    source: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)
