"""
Streaming the evaluation PDF to an HTTP response.

The HTTP layer needs two things from us, in this order:
1. A go/no-go *before* it commits to a 200 response. stream_evaluation_pdf()
   validates the record eagerly and raises ValidationError right away.
2. An iterator of byte chunks. Rendering happens lazily, inside the
   iterator, after the response headers are already on the wire.

Because of (2), a failure while drawing can't become a 500 any more. It's
logged and the stream simply ends.
"""

import logging
import re
from typing import Callable, Iterator, Optional

from app.config import settings
from app.schemas.evaluations import EvaluationRecord
from app.services.errors import RenderError, ValidationError
from app.services.evaluation_pdf import EvaluationPDFAssembler

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_]")


class OutputStreamer:
    """Forward-only, file-like writer that hands bytes to a sink in chunks.

    Nothing is kept after it's been handed on. Once closed, further writes
    are an error.

    Args:
        sink: Called with each chunk, in order.
        chunk_size: Maximum chunk length in bytes.
    """

    def __init__(self, sink: Callable[[bytes], None], chunk_size: Optional[int] = None):
        self._sink = sink
        self.chunk_size = chunk_size or settings.PDF_STREAM_CHUNK_SIZE
        self.bytes_sent = 0
        self.closed = False

    @property
    def started(self) -> bool:
        """True once any byte has left. Response metadata is fixed from here."""
        return self.bytes_sent > 0

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to a closed OutputStreamer")
        view = memoryview(data)
        for start in range(0, len(view), self.chunk_size):
            chunk = bytes(view[start:start + self.chunk_size])
            self._sink(chunk)
            self.bytes_sent += len(chunk)
        return len(data)

    def flush(self) -> None:
        """Nothing is buffered here; present for file-like callers."""

    def close(self) -> None:
        self.closed = True


def safe_filename_part(value: Optional[str], fallback: str) -> str:
    """Replace every character outside [A-Za-z0-9_] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", value or fallback)


def build_filename(resident_name: Optional[str], evaluator_name: Optional[str]) -> str:
    """Suggested download name, e.g. ``Evaluacion_Ana_Dr__P_rez.pdf``."""
    resident = safe_filename_part(resident_name, "Residente")
    evaluator = safe_filename_part(evaluator_name, "Evaluador")
    filename = f"Evaluacion_{resident}_{evaluator}.pdf"
    return filename.replace('"', "")


def content_disposition(filename: str) -> str:
    return f'attachment; filename="{filename}"'


def stream_evaluation_pdf(
    record: EvaluationRecord, chunk_size: Optional[int] = None,
) -> Iterator[bytes]:
    """Validate ``record`` now, and return an iterator that renders it.

    Raises:
        ValidationError: before any byte is produced.
    """
    missing = record.missing_fields()
    if missing:
        raise ValidationError(missing)
    return _render_chunks(record, chunk_size)


def _render_chunks(record: EvaluationRecord, chunk_size: Optional[int]) -> Iterator[bytes]:
    """Render ``record`` and yield the PDF in chunks.

    Delivery is chunked but not incremental: ReportLab serialises the
    document in one piece on save(), so the whole PDF is in memory before
    the first chunk is yielded.
    """
    chunks: list[bytes] = []
    streamer = OutputStreamer(chunks.append, chunk_size)
    assembler = EvaluationPDFAssembler(streamer)

    try:
        assembler.assemble(record)
    except RenderError:
        # Headers are already sent; all we can do is end the stream.
        logger.exception(
            "PDF rendering failed for resident=%r evaluator=%r",
            record.resident_name, record.evaluator_name,
        )
        return
    finally:
        streamer.close()

    logger.info(
        "PDF for resident=%r rendered: %d page(s), %d bytes",
        record.resident_name, assembler.page_count, streamer.bytes_sent,
    )
    yield from chunks
