"""
Pydantic schemas for the evaluation PDF API.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

# Forms send scores as strings, but a bare number is accepted too.
ScoreValue = Union[str, int, float]


class EvaluationRecord(BaseModel):
    """A filled-in ward round evaluation, as posted by the form.

    Every field is optional at the schema level so that a missing field
    reaches the PDF pipeline and is reported there with the list of what's
    absent, instead of a generic 422.
    """
    evaluator_name: Optional[str] = Field(default=None, alias="evaluatorName")
    resident_name: Optional[str] = Field(default=None, alias="residentName")
    scores: Optional[dict[str, Optional[ScoreValue]]] = None
    comments: Optional[dict[str, Optional[str]]] = None
    recommendation: Optional[str] = None
    average_score: Optional[ScoreValue] = Field(default=None, alias="averageScore")

    model_config = {"frozen": True, "populate_by_name": True}

    def missing_fields(self) -> list[str]:
        """Names (JSON spelling) of required fields that are absent or blank."""
        missing = []
        if not self.evaluator_name:
            missing.append("evaluatorName")
        if not self.resident_name:
            missing.append("residentName")
        if self.scores is None:
            missing.append("scores")
        if self.comments is None:
            missing.append("comments")
        return missing


class ErrorResponse(BaseModel):
    """Body of a 400 response for an incomplete evaluation."""
    message: str
    missing_fields: list[str] = []
