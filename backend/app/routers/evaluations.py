"""
Evaluation PDF endpoint.

POST /generate-pdf takes a filled-in evaluation form as JSON and answers
with the PDF as a download:

1. The record is checked first. Missing evaluator, resident, scores or
   comments → 400 with the list of missing fields, and no PDF.
2. Otherwise headers go out immediately (Content-Type, Content-Disposition
   with a sanitised filename) and the PDF is streamed as it's rendered.

The PDF is generated on demand and never stored.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from app.schemas.evaluations import ErrorResponse, EvaluationRecord
from app.services.errors import ValidationError
from app.services.pdf_stream import (
    PDF_MEDIA_TYPE,
    build_filename,
    content_disposition,
    stream_evaluation_pdf,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["evaluations"])

MISSING_DATA_MESSAGE = "Faltan datos necesarios para generar el PDF."


@router.post(
    "/generate-pdf",
    responses={
        200: {"content": {PDF_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse},
    },
)
async def generate_pdf(record: EvaluationRecord):
    """Render an evaluation record as a downloadable PDF."""
    logger.info("POST /generate-pdf received")

    try:
        chunks = stream_evaluation_pdf(record)
    except ValidationError as exc:
        logger.warning("Rejected evaluation, missing fields: %s", exc.missing_fields)
        error = ErrorResponse(
            message=MISSING_DATA_MESSAGE,
            missing_fields=exc.missing_fields,
        )
        return JSONResponse(status_code=400, content=error.model_dump())

    logger.info(
        "Evaluator: %s | Resident: %s", record.evaluator_name, record.resident_name,
    )
    filename = build_filename(record.resident_name, record.evaluator_name)
    return StreamingResponse(
        chunks,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )
