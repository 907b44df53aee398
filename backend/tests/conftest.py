"""
Test fixtures shared across the test suite.

Architecture:
- HTTP tests use the real FastAPI app through httpx's ASGITransport. There
  is no database or external service, so no dependency overrides.
- Layout tests render through RecordingCanvas: a ReportLabCanvas that
  writes a real PDF *and* keeps a list of every drawing call, so tests
  can assert on what was drawn where without parsing PDF content streams.
"""

from io import BytesIO

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.schemas.evaluations import EvaluationRecord
from app.services.evaluation_pdf import EvaluationPDFAssembler
from app.services.pdf_canvas import ReportLabCanvas


class RecordingCanvas(ReportLabCanvas):
    """ReportLabCanvas that remembers what it drew."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.operations: list[dict] = []
        self._font = None

    def set_style(self, style):
        self._font = (style.font_name, style.font_size)
        super().set_style(style)

    def draw_text(self, x, y, text, align="left"):
        self.operations.append({
            "kind": "text", "text": text, "x": x, "y": y, "align": align,
            "font": self._font, "page": self.page_count,
        })
        super().draw_text(x, y, text, align=align)

    def draw_rule(self, x1, x2, y, width=0.5):
        self.operations.append({
            "kind": "rule", "x1": x1, "x2": x2, "y": y, "page": self.page_count,
        })
        super().draw_rule(x1, x2, y, width=width)

    def draw_footer(self, text, y):
        self.operations.append({
            "kind": "footer", "text": text, "y": y, "page": self.page_count,
        })
        super().draw_footer(text, y)

    def texts(self) -> list[str]:
        """Body text drawn, in drawing order (footers excluded)."""
        return [op["text"] for op in self.operations if op["kind"] == "text"]

    def text_ops(self, text: str) -> list[dict]:
        return [
            op for op in self.operations
            if op["kind"] == "text" and op["text"] == text
        ]


@pytest.fixture
def render_recorded():
    """Render a record; returns (RecordingCanvas, pdf_bytes, assembler)."""

    def _render(record: EvaluationRecord):
        made = []

        def factory(*args, **kwargs):
            pdf = RecordingCanvas(*args, **kwargs)
            made.append(pdf)
            return pdf

        buffer = BytesIO()
        assembler = EvaluationPDFAssembler(buffer, canvas_factory=factory)
        assembler.assemble(record)
        return made[0], buffer.getvalue(), assembler

    return _render


@pytest.fixture
def evaluation_payload() -> dict:
    """A fully filled-in form, as the browser posts it."""
    return {
        "evaluatorName": "Dr. Pérez",
        "residentName": "Ana María",
        "scores": {
            "crit_1_1": "3",
            "crit_1_2": "4",
            "crit_2_1": "5",
            "crit_3_1": "4",
            "crit_4_1": "5",
        },
        "comments": {
            "comments_1": "Buen razonamiento clínico.",
            "comments_2": "Presentación clara.",
            "comments_general": "Desempeño sólido durante el pase.",
        },
        "recommendation": "Apto",
        "averageScore": "4.2",
    }


@pytest.fixture
def minimal_record() -> EvaluationRecord:
    """One score, one comment, nothing optional."""
    return EvaluationRecord.model_validate({
        "evaluatorName": "Dr. Pérez",
        "residentName": "Ana",
        "scores": {"crit_1_1": "3"},
        "comments": {"comments_1": "ok"},
    })


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client against the real FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
