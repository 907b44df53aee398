"""
Evaluation PDF — lays out a ward round evaluation on US Letter pages.

Document shape (always the same):
1. Centred title
2. Resident / evaluator header
3. Four scored sections, in form order. Each one has a bold title with a
   thin rule, one line per criterion (label left, ``[ score ]`` right) and
   a comment block
4. "Evaluación General": general comments, final recommendation and
   average score

Layout is done by hand on a ReportLab canvas. A LayoutCursor tracks the
vertical position; every element asks it for room *before* drawing, so
nothing is drawn past the bottom margin. Labels too wide for the space left
of their score are cut with an ellipsis (see text_layout.py).

Usage:
    assembler = EvaluationPDFAssembler(output)
    assembler.assemble(record)        # writes the PDF to ``output``

    pdf_bytes = render_evaluation_pdf(record)
"""

import logging
from io import BytesIO
from typing import BinaryIO, Callable, Optional

from reportlab.lib.pagesizes import letter

from app.config import settings
from app.schemas.evaluations import EvaluationRecord
from app.services.criteria import (
    SECTIONS,
    SUMMARY_COMMENT_KEY,
    SUMMARY_COMMENT_LABEL,
    SUMMARY_TITLE,
    SectionSpec,
    criteria_for_section,
    criterion_label,
)
from app.services.errors import RenderError, ValidationError
from app.services.layout_cursor import LayoutCursor, Margins
from app.services.pdf_canvas import ReportLabCanvas
from app.services.text_layout import (
    TextStyle,
    fit_label,
    label_budget,
    score_token,
    wrap_text,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = letter
PAGE_MARGINS = Margins(top=50, bottom=50, left=60, right=60)
LINE_SPACING = 1.2

DOCUMENT_TITLE = "Evaluación de Pase de Visita - R2 Cuidados Intensivos"
COMMENT_LABEL = "Comentarios:"
NO_COMMENTS = "(Sin comentarios)"
NO_RECOMMENDATION = "N/A"
NO_AVERAGE = "--"

COMMENT_INDENT = 15
RULE_OFFSET = 2          # Gap between a section title and its rule
FOOTER_OFFSET = 0.4 * 72  # Page number baseline, from the bottom edge


def _style(font_name: str, font_size: float) -> TextStyle:
    return TextStyle(font_name, font_size, leading=font_size * LINE_SPACING)


def _build_styles() -> dict:
    """Text styles used in the evaluation PDF, keyed by role."""
    return {
        "title": _style("Helvetica-Bold", 16),
        "header": _style("Helvetica-Bold", 11),
        "section": _style("Helvetica-Bold", 13),
        "body": _style("Helvetica", 9),
        "comment_label": _style("Helvetica-Oblique", 9),
        "summary": _style("Helvetica-Bold", 11),
    }


class SectionRenderer:
    """Draws sections (title, criterion lines, comments) at the cursor."""

    def __init__(self, pdf: ReportLabCanvas, cursor: LayoutCursor, styles: dict):
        self.pdf = pdf
        self.cursor = cursor
        self.styles = styles

    def render(self, spec: SectionSpec, record: EvaluationRecord) -> int:
        """Render one scored section. Returns the number of criterion lines."""
        self.draw_section_title(spec.title)

        criteria = criteria_for_section(spec, record.scores)
        for criterion_id, score in criteria:
            self.draw_criterion_line(criterion_label(criterion_id), score)

        comments = record.comments or {}
        self.draw_comment_block(COMMENT_LABEL, comments.get(spec.comment_key))
        return len(criteria)

    # ------------------------------------------------------------------
    # ELEMENTS
    # ------------------------------------------------------------------

    def draw_section_title(self, title: str) -> None:
        """Bold title followed by a rule running to the right margin."""
        style = self.styles["section"]
        self.cursor.move_down(1.5, style.leading)
        # Title, rule and the first line below it stay on the same page.
        self.cursor.ensure_room(
            style.leading * 1.5 + RULE_OFFSET + self.styles["body"].leading
        )
        self.draw_text(title, style)
        self.pdf.draw_rule(
            self.cursor.x, self.cursor.right_edge, self.cursor.pdf_y(RULE_OFFSET),
        )
        self.cursor.move_down(0.5, style.leading)

    def draw_criterion_line(self, label: str, score: Optional[object]) -> None:
        """Label on the left, ``[ score ]`` right-aligned on the same baseline."""
        style = self.styles["body"]
        measure = self.pdf.string_width

        # An oversized score is cut like a label so it never crosses the
        # left margin.
        token = fit_label(score_token(score), self.cursor.content_width, style, measure).text
        budget = label_budget(self.cursor.content_width, token, style, measure)
        display = fit_label(label, budget, style, measure)

        self.cursor.ensure_room(style.leading)
        self.pdf.set_style(style)
        baseline = self.cursor.pdf_y(self.pdf.ascent(style))
        if display.text:
            self.pdf.draw_text(self.cursor.left_edge, baseline, display.text)
        self.pdf.draw_text(self.cursor.right_edge, baseline, token, align="right")
        self.cursor.advance(style.leading)

    def draw_comment_block(self, label: str, text: Optional[str]) -> None:
        """Italic label, then the comment wrapped and indented underneath."""
        label_style = self.styles["comment_label"]
        body = self.styles["body"]

        if not text or not text.strip():
            text = NO_COMMENTS

        self.cursor.move_down(0.5, body.leading)
        self.cursor.ensure_room(label_style.leading + body.leading)
        self.draw_text(label, label_style)

        self.draw_paragraph(text, body, indent=COMMENT_INDENT)

    def draw_paragraph(self, text: str, style: TextStyle, indent: float = 0.0) -> None:
        """Draw ``text`` wrapped to the width left of the right margin."""
        width = self.cursor.content_width - indent
        for line in wrap_text(text, width, style, self.pdf.string_width):
            self.draw_text(line, style, indent=indent)

    def draw_text(self, text: str, style: TextStyle, indent: float = 0.0,
                  align: str = "left") -> None:
        """Draw a single line at the cursor and move below it."""
        self.cursor.ensure_room(style.leading)
        x = self.cursor.set_x(self.cursor.left_edge + indent)
        baseline = self.cursor.pdf_y(self.pdf.ascent(style))

        self.pdf.set_style(style)
        if text:
            if align == "center":
                self.pdf.draw_text(self.cursor.page_width / 2, baseline, text, align="center")
            else:
                self.pdf.draw_text(x, baseline, text)

        self.cursor.advance(style.leading)
        self.cursor.set_x(self.cursor.left_edge)


class EvaluationPDFAssembler:
    """Builds the complete evaluation PDF into an output stream.

    Args:
        output: Destination for the PDF bytes (file, BytesIO, OutputStreamer).
        canvas_factory: Builds the drawing backend. Tests pass a recording
            subclass of ReportLabCanvas.
        page_compression: Deflate page streams (defaults to settings).
    """

    def __init__(
        self,
        output: BinaryIO,
        canvas_factory: Callable[..., ReportLabCanvas] = ReportLabCanvas,
        page_compression: Optional[bool] = None,
    ):
        self.output = output
        self.canvas_factory = canvas_factory
        self.page_compression = (
            settings.PDF_PAGE_COMPRESSION if page_compression is None
            else page_compression
        )
        self.styles = _build_styles()
        self.page_count = 0

    def assemble(self, record: EvaluationRecord) -> BinaryIO:
        """Lay out ``record`` and write the finished PDF to the output.

        Raises:
            ValidationError: required fields missing. Nothing has been
                written to the output.
            RenderError: drawing failed part way through.
        """
        missing = record.missing_fields()
        if missing:
            raise ValidationError(missing)

        cursor = None
        try:
            pdf = self.canvas_factory(
                self.output,
                pagesize=PAGE_SIZE,
                title=f"Evaluación - {record.resident_name}",
                author=settings.PDF_AUTHOR,
                subject=DOCUMENT_TITLE,
                page_compression=self.page_compression,
            )
            cursor = LayoutCursor(
                PAGE_SIZE[0], PAGE_SIZE[1], PAGE_MARGINS,
                on_page_break=lambda: self._finish_page(pdf),
            )
            renderer = SectionRenderer(pdf, cursor, self.styles)

            self._render_header(renderer, record)
            for spec in SECTIONS:
                lines = renderer.render(spec, record)
                logger.debug("Rendered section %r with %d criteria", spec.title, lines)
            self._render_summary(renderer, record)

            # Last page: footer, then save() flushes it even if half empty.
            self._add_page_number(pdf)
            pdf.save()
        except Exception as exc:
            page_index = cursor.page_index if cursor is not None else 0
            raise RenderError(f"Failed to render evaluation PDF: {exc}",
                              page_index=page_index) from exc

        self.page_count = pdf.page_count
        return self.output

    # ------------------------------------------------------------------
    # DOCUMENT PARTS
    # ------------------------------------------------------------------

    def _render_header(self, renderer: SectionRenderer, record: EvaluationRecord):
        """Centred title, then resident and evaluator in bold."""
        title = self.styles["title"]
        renderer.draw_text(DOCUMENT_TITLE, title, align="center")
        renderer.cursor.move_down(1.5, title.leading)

        header = self.styles["header"]
        renderer.draw_paragraph(f"Residente: {record.resident_name}", header)
        renderer.draw_paragraph(f"Evaluador: {record.evaluator_name}", header)

    def _render_summary(self, renderer: SectionRenderer, record: EvaluationRecord):
        """General comments, final recommendation and average score."""
        renderer.draw_section_title(SUMMARY_TITLE)
        comments = record.comments or {}
        renderer.draw_comment_block(
            SUMMARY_COMMENT_LABEL, comments.get(SUMMARY_COMMENT_KEY),
        )

        summary = self.styles["summary"]
        renderer.cursor.move_down(1, summary.leading)

        recommendation = record.recommendation or NO_RECOMMENDATION
        average = record.average_score
        if average is None or str(average).strip() == "":
            average = NO_AVERAGE
        renderer.draw_paragraph(f"Recomendación Final: {recommendation}", summary)
        renderer.draw_paragraph(f"Puntaje Promedio: {average}", summary)

    def _finish_page(self, pdf: ReportLabCanvas) -> None:
        self._add_page_number(pdf)
        pdf.show_page()

    @staticmethod
    def _add_page_number(pdf: ReportLabCanvas) -> None:
        pdf.draw_footer(f"Página {pdf.page_count}", FOOTER_OFFSET)


def render_evaluation_pdf(record: EvaluationRecord, **kwargs) -> bytes:
    """Render the whole PDF into memory and return its bytes."""
    buffer = BytesIO()
    EvaluationPDFAssembler(buffer, **kwargs).assemble(record)
    return buffer.getvalue()
