"""
Criterion labels and section layout for the ward round evaluation form.

Both tables are read-only for the life of the process. The form posts
criterion IDs (``crit_<section>_<item>``); the PDF shows the labels below.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

CRITERIA_LABELS = MappingProxyType({
    "crit_1_1": "Evaluación inicial y priorización de problemas",
    "crit_1_2": "Razonamiento diagnóstico e interpretación de exámenes",
    "crit_1_3": "Plan terapéutico integral (farma/no-farma, objetivos)",
    "crit_1_4": "Manejo de soporte orgánico (VM, vasoactivos, etc.)",
    "crit_2_1": "Presentación del caso (claridad, concisión, síntesis)",
    "crit_2_2": "Comunicación con paciente/familia (plan, empatía)",
    "crit_2_3": "Interacción con equipo (claridad, respeto, colaboración)",
    "crit_3_1": "Dirección del pase de visita",
    "crit_3_2": "Gestión del tiempo y enfoque",
    "crit_3_3": "Involucramiento del equipo (enfermería, etc.)",
    "crit_4_1": "Actitud y conducta profesional (respeto, responsabilidad)",
    "crit_4_2": "Respuesta a preguntas (reflexiva, honesta, no defensiva)",
    "crit_4_3": "Reconocimiento de limitaciones y búsqueda de ayuda",
})


@dataclass(frozen=True)
class SectionSpec:
    """One scored section of the form."""
    title: str
    criteria_prefix: str
    comment_key: str


SECTIONS: tuple[SectionSpec, ...] = (
    SectionSpec("1. Manejo Clínico y Toma de Decisiones", "crit_1_", "comments_1"),
    SectionSpec("2. Comunicación", "crit_2_", "comments_2"),
    SectionSpec("3. Liderazgo y Organización", "crit_3_", "comments_3"),
    SectionSpec("4. Profesionalismo", "crit_4_", "comments_4"),
)

# --- Summary block ---
SUMMARY_TITLE = "Evaluación General"
SUMMARY_COMMENT_LABEL = "Comentarios Generales / Síntesis:"
SUMMARY_COMMENT_KEY = "comments_general"


def criterion_label(criterion_id: str) -> str:
    """Human-readable label, or the raw ID for criteria we don't know."""
    return CRITERIA_LABELS.get(criterion_id, criterion_id)


def criteria_for_section(
    spec: SectionSpec, scores: Optional[dict],
) -> list[tuple[str, object]]:
    """Return (criterion_id, score) pairs belonging to one section.

    Known criteria come first in label-table order, so the PDF reads the
    same whatever order the form serialised its fields in. Criteria we
    have no label for follow in the order they were posted.
    """
    if not scores:
        return []

    matching = [key for key in scores if key.startswith(spec.criteria_prefix)]
    known = [key for key in CRITERIA_LABELS if key in scores and key in matching]
    unknown = [key for key in matching if key not in CRITERIA_LABELS]
    return [(key, scores[key]) for key in known + unknown]
