"""
Page layout primitives for the PDF export.

PdfPageContext owns the canvas and the vertical cursor for one render call.
Every write goes through it, so page breaks happen in exactly one place:
ensure_space() starts a new page whenever the requested height no longer
fits above the bottom margin.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfgen import canvas

from quizexport.export_utils import wrap_words

logger = logging.getLogger(__name__)

PAGE_SIZES = {"letter": letter, "a4": A4}

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

FOOTER_FONT_SIZE = 9
FOOTER_Y = 25


class PdfSettings(BaseModel):
    """Page geometry and type sizes, read from the ``pdf`` config section."""

    model_config = ConfigDict(frozen=True)

    page_size: str = "letter"
    margin: float = 50
    line_spacing: float = 1.2
    question_spacing: float = 20
    title_font_size: float = 18
    heading_font_size: float = 14
    normal_font_size: float = 11
    small_font_size: float = 9

    @classmethod
    def from_config(cls, config: Optional[dict]) -> "PdfSettings":
        section = (config or {}).get("pdf") or {}
        return cls(**section)

    @property
    def pagesize(self):
        try:
            return PAGE_SIZES[self.page_size.lower()]
        except KeyError:
            raise ValueError(f"Unsupported PDF page size: {self.page_size}") from None

    @property
    def text_width(self) -> float:
        return self.pagesize[0] - 2 * self.margin


class NumberedCanvas(canvas.Canvas):
    """Canvas that stamps 'Version: X | Page n of N' on every page at save time.

    Page states are held back in showPage() until the total page count is
    known.
    """

    def __init__(self, *args, version_code: str = "", **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self.version_code = version_code
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(total)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def draw_footer(self, total: int):
        width = self._pagesize[0]
        self.setFont(FONT, FOOTER_FONT_SIZE)
        self.drawCentredString(
            width / 2,
            FOOTER_Y,
            f"Version: {self.version_code} | Page {self._pageNumber} of {total}",
        )


class PdfPageContext:
    """Cursor and page state for a single PDF render.

    States: no page open, page open with cursor ``y``, closed. Not shared
    between renders.
    """

    def __init__(self, buf, settings: PdfSettings, version_code: str = ""):
        self.settings = settings
        self.page_width, self.page_height = settings.pagesize
        self.canvas = NumberedCanvas(buf, pagesize=settings.pagesize, version_code=version_code)
        self.page_open = False
        self.closed = False
        self.page_count = 0
        self.y = self.page_height - settings.margin

    @property
    def margin(self) -> float:
        return self.settings.margin

    def line_height(self, font_size: float) -> float:
        return font_size * self.settings.line_spacing

    def start_new_page(self):
        if self.closed:
            raise RuntimeError("PdfPageContext is closed")
        if self.page_open:
            self.canvas.showPage()
        self.page_open = True
        self.page_count += 1
        self.y = self.page_height - self.margin

    def ensure_space(self, required: float):
        """Start a new page unless ``required`` points fit above the bottom margin."""
        if not self.page_open or self.y - self.margin < required:
            self.start_new_page()

    def skip(self, amount: float):
        self.y -= amount

    def measure(self, text: str, font: str, size: float) -> float:
        return self.canvas.stringWidth(text, font, size)

    def wrap(self, text: str, font: str, size: float, max_width: Optional[float] = None) -> List[str]:
        width = self.settings.text_width if max_width is None else max_width
        return wrap_words(text, width, lambda s: self.measure(s, font, size))

    def write_line(self, text: str, font: str = FONT, size: Optional[float] = None, x: Optional[float] = None):
        size = size or self.settings.normal_font_size
        self.ensure_space(self.line_height(size))
        self.canvas.setFont(font, size)
        self.canvas.drawString(self.margin if x is None else x, self.y, text)
        self.y -= self.line_height(size)

    def write_centered(self, text: str, font: str = FONT, size: Optional[float] = None):
        size = size or self.settings.normal_font_size
        self.ensure_space(self.line_height(size))
        self.canvas.setFont(font, size)
        self.canvas.drawCentredString(self.page_width / 2, self.y, text)
        self.y -= self.line_height(size)

    def write_wrapped_text(self, text: str, font: str = FONT, size: Optional[float] = None, indent: float = 0) -> int:
        """Write word-wrapped text, one ensure_space() per line.

        Returns:
            Number of lines written.
        """
        size = size or self.settings.normal_font_size
        lines = self.wrap(text, font, size, self.settings.text_width - indent)
        for line in lines:
            self.write_line(line, font, size, x=self.margin + indent)
        return len(lines)

    def write_two_column_wrapped_text(
        self,
        left_text: str,
        right_text: str,
        left_x: float,
        right_x: float,
        column_width: float,
        font: str = FONT,
        size: Optional[float] = None,
    ) -> int:
        """Write two independently wrapped columns side by side.

        Emits max(left lines, right lines) rows; the shorter column leaves
        its remaining cells blank.

        Returns:
            Number of rows written.
        """
        size = size or self.settings.normal_font_size
        left = self.wrap(left_text or "", font, size, column_width)
        right = self.wrap(right_text or "", font, size, column_width)
        rows = max(len(left), len(right))
        for i in range(rows):
            self.ensure_space(self.line_height(size))
            self.canvas.setFont(font, size)
            if i < len(left):
                self.canvas.drawString(left_x, self.y, left[i])
            if i < len(right):
                self.canvas.drawString(right_x, self.y, right[i])
            self.y -= self.line_height(size)
        return rows

    def close(self):
        """Finish the last page and serialize the document."""
        if self.closed:
            return
        if not self.page_open:
            self.start_new_page()
        self.canvas.showPage()
        self.canvas.save()
        self.page_open = False
        self.closed = True
        logger.debug("close: wrote %d pages", self.page_count)
