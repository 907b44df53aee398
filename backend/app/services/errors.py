"""
Errors raised by the evaluation PDF pipeline.

Two failure classes, split by *when* they can happen:

- ValidationError: the record is missing something required. Raised before
  the output stream is opened, so the HTTP layer can still answer with a
  normal 400 response.
- RenderError: anything that goes wrong while drawing. By then the
  response headers are gone, so this is only logged and ends the stream.
"""


class EvaluationPDFError(Exception):
    """Base class for evaluation PDF failures."""


class ValidationError(EvaluationPDFError):
    """Required top-level fields are missing from the evaluation record."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            "Missing required fields: " + ", ".join(self.missing_fields)
        )


class RenderError(EvaluationPDFError):
    """Layout or drawing failed after the document was opened."""

    def __init__(self, message: str, page_index: int = 0):
        self.page_index = page_index
        super().__init__(f"{message} (page {page_index + 1})")
