from typing import List, Optional

from pydantic import BaseModel, Field


class OCRLine(BaseModel):
    text: str
    bbox: List[int] = Field(..., min_length=4, max_length=4)
    conf: float = Field(..., ge=0.0, le=1.0)


class OCRPage(BaseModel):
    num: int
    width: Optional[int] = None
    height: Optional[int] = None
    rotation: int = 0
    lines: List[OCRLine] = Field(default_factory=list)

    def rows(self) -> List[List[OCRLine]]:
        """Group lines into visual rows, each ordered left to right.

        Table labels and their values come back as separate boxes; a line joins
        the current row when its vertical centre lies within half a line
        height of the row's first line.
        """
        ordered = sorted(self.lines, key=lambda ln: ((ln.bbox[1] + ln.bbox[3]) / 2, ln.bbox[0]))
        rows: List[List[OCRLine]] = []
        anchor_center = 0.0
        anchor_height = 0.0
        for line in ordered:
            center = (line.bbox[1] + line.bbox[3]) / 2
            height = max(line.bbox[3] - line.bbox[1], 1)
            if rows and abs(center - anchor_center) <= max(anchor_height, height) / 2:
                rows[-1].append(line)
                continue
            rows.append([line])
            anchor_center, anchor_height = center, height
        return [sorted(row, key=lambda ln: ln.bbox[0]) for row in rows]

    @property
    def text(self) -> str:
        return "\n".join(
            " ".join(ln.text for ln in row if ln.text) for row in self.rows()
        ).strip()


class OCRData(BaseModel):
    language: Optional[str] = None
    pages: List[OCRPage] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.pages if p.text)

    @property
    def line_count(self) -> int:
        return sum(len(p.lines) for p in self.pages)
