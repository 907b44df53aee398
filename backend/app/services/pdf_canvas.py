"""
Thin wrapper around ReportLab's low-level canvas.

The evaluation PDF is laid out by hand (see evaluation_pdf.py) rather than
with Platypus flowables, because each criterion line needs its label
measured against a right-aligned score on the same baseline. This module
is the only place that talks to ReportLab directly:

- string_width(): text metrics for the built-in Type 1 fonts
- ReportLabCanvas: font state, text, rules, footers and page breaks

ReportLab resets the graphics state on every showPage(), so the wrapper
remembers the active text style and re-applies it on the new page.
"""

from functools import lru_cache
from typing import BinaryIO, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from app.services.text_layout import TextStyle

RULE_COLOR = colors.HexColor("#aaaaaa")     # Light gray — section rules
FOOTER_COLOR = colors.HexColor("#718096")   # Medium gray — page numbers
FOOTER_FONT = "Helvetica"
FOOTER_SIZE = 8


@lru_cache(maxsize=4096)
def string_width(text: str, font_name: str, font_size: float) -> float:
    """Rendered width of ``text`` in points.

    Cached: truncation measures many prefixes of the same label.
    """
    return pdfmetrics.stringWidth(text, font_name, font_size)


@lru_cache(maxsize=64)
def font_ascent(font_name: str, font_size: float) -> float:
    """Distance from the top of a line to its baseline."""
    ascent, _descent = pdfmetrics.getAscentDescent(font_name, font_size)
    return ascent


class ReportLabCanvas:
    """Drawing backend for one PDF document.

    Args:
        output: Anything with a ``write(bytes)`` method. ReportLab writes
            the finished document to it on save().
        pagesize: (width, height) in points.
        title, author, subject: PDF document metadata.
        page_compression: Deflate page content streams.
    """

    def __init__(
        self,
        output: BinaryIO,
        pagesize: tuple[float, float] = letter,
        title: str = "",
        author: str = "",
        subject: str = "",
        page_compression: bool = True,
    ):
        self.pagesize = pagesize
        self._canvas = canvas.Canvas(
            output,
            pagesize=pagesize,
            pageCompression=1 if page_compression else 0,
        )
        self._canvas.setTitle(title)
        self._canvas.setAuthor(author)
        self._canvas.setSubject(subject)
        self._style: Optional[TextStyle] = None
        self.page_count = 1

    # --- Metrics ---

    @staticmethod
    def string_width(text: str, font_name: str, font_size: float) -> float:
        return string_width(text, font_name, font_size)

    @staticmethod
    def ascent(style: TextStyle) -> float:
        return font_ascent(style.font_name, style.font_size)

    # --- Drawing ---

    def set_style(self, style: TextStyle) -> None:
        self._style = style
        self._canvas.setFont(style.font_name, style.font_size)

    def draw_text(self, x: float, y: float, text: str, align: str = "left") -> None:
        """Draw one line of text with its baseline at ``y``.

        For ``right`` alignment ``x`` is the right edge, for ``center`` the
        midpoint.
        """
        if align == "right":
            self._canvas.drawRightString(x, y, text)
        elif align == "center":
            self._canvas.drawCentredString(x, y, text)
        else:
            self._canvas.drawString(x, y, text)

    def draw_rule(self, x1: float, x2: float, y: float, width: float = 0.5) -> None:
        """Thin horizontal line, used under section titles."""
        self._canvas.saveState()
        self._canvas.setLineCap(0)  # butt
        self._canvas.setLineWidth(width)
        self._canvas.setStrokeColor(RULE_COLOR)
        self._canvas.line(x1, y, x2, y)
        self._canvas.restoreState()

    def draw_footer(self, text: str, y: float) -> None:
        """Small centred text at the bottom of the page (page numbers)."""
        self._canvas.saveState()
        self._canvas.setFont(FOOTER_FONT, FOOTER_SIZE)
        self._canvas.setFillColor(FOOTER_COLOR)
        self._canvas.drawCentredString(self.pagesize[0] / 2, y, text)
        self._canvas.restoreState()

    # --- Pages ---

    def show_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1
        if self._style is not None:
            self._canvas.setFont(self._style.font_name, self._style.font_size)

    def save(self) -> None:
        """Close the last page and write the whole document to the output."""
        self._canvas.save()
