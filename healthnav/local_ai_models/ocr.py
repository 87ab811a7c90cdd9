from __future__ import annotations

import os
from typing import Optional

import numpy as np

from healthnav.domain.errors import OCRError
from healthnav.domain.ports.OCR_provider import OCR_provider, ProgressCallback
from healthnav.domain.schemas.image_data import ImageData
from healthnav.domain.schemas.ocr_data import OCRData, OCRLine, OCRPage

from rapidocr import RapidOCR, EngineType, ModelType, OCRVersion, LangRec, LangDet


def _quad_to_bbox(quad: list[list[float]]) -> list[int]:
    xs = [p[0] for p in quad]
    ys = [p[1] for p in quad]
    return [int(min(xs)), int(min(ys)), int(max(xs)), int(max(ys))]


def _enum_value(enum_cls, value: Optional[str]):
    if not value:
        return None
    try:
        return getattr(enum_cls, value.upper())
    except AttributeError:
        return None


# RapidOCR param key -> (enum, env var). Unset entries keep RapidOCR's bundled defaults.
_PARAM_ENV = {
    "Rec.engine_type": (EngineType, "RAPID_REC_ENGINE"),
    "Rec.model_type": (ModelType, "RAPID_REC_MODEL_TYPE"),
    "Rec.ocr_version": (OCRVersion, "RAPID_REC_VERSION"),
    "Rec.lang_type": (LangRec, "RAPID_REC_LANG"),
    "Det.engine_type": (EngineType, "RAPID_DET_ENGINE"),
    "Det.model_type": (ModelType, "RAPID_DET_MODEL_TYPE"),
    "Det.ocr_version": (OCRVersion, "RAPID_DET_VERSION"),
    "Det.lang_type": (LangDet, "RAPID_DET_LANG"),
}


class RapidOCRProvider(OCR_provider):
    """RapidOCR wrapper for photographed reports and labels (English text)."""

    def __init__(self,
                 *,
                 min_conf: Optional[float] = None,
                 params: Optional[dict[str, str]] = None) -> None:
        rapid_params: dict[str, object] = {}
        for key, (enum_cls, env) in _PARAM_ENV.items():
            value = _enum_value(enum_cls, (params or {}).get(key) or os.environ.get(env))
            if value is not None:
                rapid_params[key] = value

        self._engine = RapidOCR(params=rapid_params or None)
        self._min_conf = min_conf if min_conf is not None else float(os.getenv("OCR_MIN_CONF", "0.0"))

    def get_text(self, data: ImageData, progress: Optional[ProgressCallback] = None) -> OCRData:
        pages: list[OCRPage] = []
        total = len(data.pages)
        if progress:
            progress(0.0)
        for idx, page in enumerate(data.pages, start=1):
            mat = page.ensure_array()
            try:
                pages.append(self._extract_page(mat, idx))
            except Exception as e:
                raise OCRError(f"rapidocr failed on page {idx}: {e}") from e
            if progress:
                progress(idx / total)
        return OCRData(language="en", pages=pages)

    def _extract_page(self, image: "np.ndarray", page_number: int) -> OCRPage:
        result = self._engine(image)

        lines: list[OCRLine] = []
        boxes = getattr(result, "boxes", None)
        if boxes is not None:
            for box, text, score in zip(boxes, result.txts, result.scores):
                conf = float(score)
                if conf < self._min_conf:
                    continue
                quad = box.tolist() if hasattr(box, "tolist") else box
                lines.append(OCRLine(text=str(text).strip(), bbox=_quad_to_bbox(quad), conf=conf))

        h, w = image.shape[:2]
        return OCRPage(num=page_number, width=w, height=h, rotation=0, lines=lines)
