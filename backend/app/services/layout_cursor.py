"""
Vertical cursor and page-break tracking for the evaluation PDF.

The cursor measures ``y`` downward from the top edge of the page (the way
you'd read the document), and converts to PDF coordinates, which grow
upward from the bottom edge, only when something is drawn.

The renderer never calls ``showPage`` itself: it asks the cursor for room
before each element and the cursor calls back into the canvas when a new
page is needed.
"""

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Margins:
    top: float
    bottom: float
    left: float
    right: float


class LayoutCursor:
    """Current write position across pages for one render.

    Args:
        page_width, page_height: Page size in points.
        margins: Page margins in points.
        on_page_break: Called once per page break, before the cursor moves
            to the top of the new page.
    """

    def __init__(
        self,
        page_width: float,
        page_height: float,
        margins: Margins,
        on_page_break: Callable[[], None],
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margins = margins
        self._on_page_break = on_page_break

        self.page_index = 0
        self.x = margins.left
        self.y = margins.top

    # ------------------------------------------------------------------
    # GEOMETRY
    # ------------------------------------------------------------------

    @property
    def left_edge(self) -> float:
        return self.margins.left

    @property
    def right_edge(self) -> float:
        return self.page_width - self.margins.right

    @property
    def content_width(self) -> float:
        return self.right_edge - self.left_edge

    @property
    def bottom_limit(self) -> float:
        """Lowest y (from the top) that content may reach."""
        return self.page_height - self.margins.bottom

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.margins.top

    def set_x(self, x: float) -> float:
        """Move horizontally, clamped to the printable area."""
        self.x = min(max(x, self.left_edge), self.right_edge)
        return self.x

    def pdf_y(self, offset: float = 0.0) -> float:
        """PDF-space y for a point ``offset`` below the cursor."""
        return self.page_height - (self.y + offset)

    # ------------------------------------------------------------------
    # MOVEMENT
    # ------------------------------------------------------------------

    def advance(self, delta_y: float) -> None:
        """Move down by ``delta_y``, starting a new page past the bottom margin."""
        if delta_y < 0:
            raise ValueError("The cursor only moves forward")
        self.y += delta_y
        if self.y > self.bottom_limit:
            self.new_page()

    def move_down(self, lines: float, leading: float) -> None:
        """Insert ``lines`` blank lines of the given leading."""
        self.advance(lines * leading)

    def ensure_room(self, height: float) -> None:
        """Break the page now if an element of ``height`` would overflow.

        An element taller than a whole page is drawn at the top of a fresh
        page rather than triggering breaks forever.
        """
        if self.y + height > self.bottom_limit and not self.at_page_top:
            self.new_page()

    def new_page(self) -> None:
        self._on_page_break()
        self.page_index += 1
        self.x = self.margins.left
        self.y = self.margins.top
