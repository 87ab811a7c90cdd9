from __future__ import annotations

import os
from typing import Optional, Tuple

import cv2
import numpy as np

from healthnav.domain.errors import UnreadableImageError
from healthnav.domain.ports.Preprocess_provider import Preprocess_cv
from healthnav.domain.schemas.image_data import ImageData, ImagePage
from healthnav.domain.schemas.input_data import InputData
from healthnav.lib.logger import get_logger

# skew outside this band is left alone
_MIN_SKEW_DEG = 0.3
_MAX_SKEW_DEG = 20.0


def _fold_angle(angle: float) -> float:
    """Rect angle modulo 90, in [-45, 45). OpenCV releases disagree on the raw range."""
    return (angle + 45.0) % 90.0 - 45.0


class PreprocessCVService(Preprocess_cv):
    """CV cleanup for phone photos of lab reports and nutrition labels.

    Decode, level the text, bring small photos up to a size RapidOCR reads
    well, flatten shadows, then boost local contrast.
    """

    def __init__(self, min_short_side: Optional[int] = None) -> None:
        self.logger = get_logger("preprocess.cv")
        self.min_short_side = min_short_side or int(os.getenv("PREPROCESS_MIN_SIDE", "1200"))
        self.dump_dir = os.getenv("DEBUG_DUMP_DIR") or None

    def get_image(self, input: InputData) -> ImageData:
        content, filename = self._load_bytes(input)
        page = ImagePage(content=content)
        mat = page.ensure_array()
        self.logger.info("source: name=%s size=%d decoded=%dx%d", filename, len(content), mat.shape[1], mat.shape[0])

        leveled, angle = self._deskew(mat)
        upscaled = self._upscale(leveled)
        final = self._enhance_image(self._flatten_shadows(upscaled))
        self.logger.info("deskew angle=%.2f, output=%dx%d", angle, final.shape[1], final.shape[0])

        if self.dump_dir:
            os.makedirs(self.dump_dir, exist_ok=True)
            cv2.imwrite(os.path.join(self.dump_dir, f"{filename or 'scan'}.preprocessed.png"), final)

        page.set_array(final)
        return ImageData(pages=[page], source=filename or ("url" if input.document.url else "inline"))

    def _load_bytes(self, input: InputData) -> Tuple[bytes, Optional[str]]:
        doc = input.document
        if doc.data is not None:
            return doc.data, doc.filename
        if doc.url:
            import requests

            try:
                resp = requests.get(str(doc.url), timeout=15)
                resp.raise_for_status()
            except requests.RequestException as e:
                raise UnreadableImageError(f"failed to download image: {e}") from e
            return resp.content, doc.filename
        raise UnreadableImageError("no image data provided")

    def _deskew(self, image: "np.ndarray") -> Tuple["np.ndarray", float]:
        h, w = image.shape[:2]
        # estimate on a small copy; full-size photos make minAreaRect slow
        factor = min(1.0, 1000.0 / max(h, w))
        small = cv2.resize(image, None, fx=factor, fy=factor, interpolation=cv2.INTER_AREA)
        gray = cv2.cvtColor(small, cv2.COLOR_BGR2GRAY)
        ink = cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_MEAN_C, cv2.THRESH_BINARY_INV, 31, 15)
        ink = cv2.dilate(ink, np.ones((1, 15), np.uint8))

        points = cv2.findNonZero(ink)
        if points is None:
            return image, 0.0
        angle = _fold_angle(cv2.minAreaRect(points)[-1])
        if abs(angle) < _MIN_SKEW_DEG or abs(angle) > _MAX_SKEW_DEG:
            return image, 0.0

        rot = cv2.getRotationMatrix2D((w / 2.0, h / 2.0), angle, 1.0)
        leveled = cv2.warpAffine(image, rot, (w, h), flags=cv2.INTER_LINEAR, borderMode=cv2.BORDER_REPLICATE)
        return leveled, float(angle)

    def _upscale(self, image: "np.ndarray") -> "np.ndarray":
        short = min(image.shape[:2])
        if short >= self.min_short_side:
            return image
        factor = self.min_short_side / float(short)
        return cv2.resize(image, None, fx=factor, fy=factor, interpolation=cv2.INTER_CUBIC)

    def _flatten_shadows(self, image: "np.ndarray") -> "np.ndarray":
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        background = cv2.medianBlur(cv2.dilate(gray, np.ones((7, 7), np.uint8)), 21)
        diff = 255 - cv2.absdiff(gray, background)
        flat = cv2.normalize(diff, None, alpha=0, beta=255, norm_type=cv2.NORM_MINMAX)
        return cv2.cvtColor(flat, cv2.COLOR_GRAY2BGR)

    def _enhance_image(self, image: "np.ndarray") -> "np.ndarray":
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
        sharp = clahe.apply(cv2.fastNlMeansDenoising(gray, None, h=7))
        return cv2.cvtColor(sharp, cv2.COLOR_GRAY2BGR)
