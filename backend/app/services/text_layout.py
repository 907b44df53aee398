"""
Line composition — deciding how a piece of text fits a horizontal budget.

Everything here is pure: functions take a ``measure(text, font, size)``
callable and return strings. Nothing draws. The PDF canvas supplies the
real measurement (ReportLab font metrics); tests can pass anything with
the same signature.

Three outcomes for a label:
- fits: returned unchanged
- too wide: cut to the longest prefix that still fits with an ellipsis
- multi-line text (comments): word-wrapped, long words hard-broken
"""

from dataclasses import dataclass
from typing import Callable, Optional

Measure = Callable[[str, str, float], float]

ELLIPSIS = "…"

# Horizontal gap between a criterion label and its score token.
LABEL_SCORE_GAP = 5.0

MISSING_SCORE = "?"


@dataclass(frozen=True)
class TextStyle:
    font_name: str
    font_size: float
    leading: float

    def width(self, text: str, measure: Measure) -> float:
        return measure(text, self.font_name, self.font_size)


@dataclass(frozen=True)
class DisplaySpec:
    """What to draw for a label, and how wide it will be."""
    text: str
    width: float
    truncated: bool = False


def score_token(score: Optional[object]) -> str:
    """Bracketed score shown at the right edge, e.g. ``[ 3 ]`` or ``[ ? ]``."""
    if score is None or str(score).strip() == "":
        return f"[ {MISSING_SCORE} ]"
    return f"[ {str(score).strip()} ]"


def label_budget(content_width: float, token: str, style: TextStyle,
                 measure: Measure) -> float:
    """Width left for a label once the score token and gap are reserved."""
    return content_width - style.width(token, measure) - LABEL_SCORE_GAP


def _fit_count(text: str, width: float, style: TextStyle, measure: Measure) -> int:
    """Largest n such that text[:n] is no wider than ``width``."""
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if style.width(text[:mid], measure) <= width:
            lo = mid
        else:
            hi = mid - 1
    return lo


def fit_label(label: str, budget: float, style: TextStyle,
              measure: Measure) -> DisplaySpec:
    """Fit ``label`` into ``budget``, truncating with an ellipsis if needed.

    The returned width never exceeds the budget. When even the ellipsis
    alone is too wide the result is empty.
    """
    width = style.width(label, measure)
    if width <= budget:
        return DisplaySpec(label, width)

    room = budget - style.width(ELLIPSIS, measure)
    if room < 0:
        return DisplaySpec("", 0.0, truncated=True)

    count = _fit_count(label, room, style, measure)
    text = label[:count].rstrip() + ELLIPSIS
    # Sub-point rounding can differ between measuring the prefix alone and
    # the prefix plus ellipsis; back off until the whole thing fits.
    while count > 0 and style.width(text, measure) > budget:
        count -= 1
        text = label[:count].rstrip() + ELLIPSIS
    return DisplaySpec(text, style.width(text, measure), truncated=True)


def wrap_text(text: str, width: float, style: TextStyle,
              measure: Measure) -> list[str]:
    """Greedy word wrap. Blank input lines are kept as empty strings.

    A word wider than the whole line is broken between characters.
    """
    lines: list[str] = []

    for paragraph in text.splitlines() or [""]:
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if style.width(candidate, measure) <= width:
                current = candidate
                continue

            if current:
                lines.append(current)
            while style.width(word, measure) > width:
                count = max(1, _fit_count(word, width, style, measure))
                lines.append(word[:count])
                word = word[count:]
            current = word

        if current:
            lines.append(current)

    return lines
