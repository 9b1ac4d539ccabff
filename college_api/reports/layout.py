"""
Declarative page layout for the generated documents.

A document is described as an ordered list of positioned text elements.
Coordinates are measured in points from the top-left corner of an A4 page;
the renderer converts them for the PDF canvas. Content code only talks to
``LayoutBuilder`` and never touches the drawing library.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from reportlab.lib.pagesizes import A4

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
LABEL_X = 50
VALUE_X = 200
COLUMN_WIDTH = 100

IDENTITY_TOP = 200
PAGE_BREAK_Y = 740
FOOTER_Y = 780

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"

PLACEHOLDER = "N/A"


@dataclass
class TextElement:
    text: str
    x: float
    y: float
    page: int = 0
    font: str = REGULAR
    size: float = 12
    align: str = "left"  # left, center or right


@dataclass
class DocumentLayout:
    title: str
    elements: List[TextElement] = field(default_factory=list)
    page_count: int = 1

    def texts(self) -> List[str]:
        return [element.text for element in self.elements]

    def on_page(self, page: int) -> List[TextElement]:
        return [element for element in self.elements if element.page == page]


class LayoutBuilder:
    """Places elements top to bottom with a vertical cursor."""

    def __init__(self, title: str):
        self.layout = DocumentLayout(title=title)
        self.page = 0
        self.y = MARGIN

    def _add(self, text, x, y, font=REGULAR, size=12, align="left"):
        self.layout.elements.append(
            TextElement(text=display(text), x=x, y=y, page=self.page, font=font, size=size, align=align)
        )

    def new_page(self):
        self.page += 1
        self.layout.page_count = self.page + 1
        self.y = MARGIN

    def _ensure_room(self, height: float):
        if self.y + height > PAGE_BREAK_Y:
            self.new_page()

    def heading(self, text, size: float = 12, bold: bool = False, gap: float = 10):
        """Centered line; the cursor moves below it."""
        self._ensure_room(size)
        self._add(text, MARGIN, self.y, font=BOLD if bold else REGULAR, size=size, align="center")
        self.y += size + gap

    def move_to(self, y: float):
        self.y = y

    def section(self, title: str, size: float = 14):
        """Section title 20pt below the cursor, its content 60pt below."""
        self._ensure_room(60 + size)
        self._add(title, LABEL_X, self.y + 20, font=BOLD, size=size)
        self.y += 60

    def rows(self, rows: Iterable[Tuple[str, object]], size: float = 12, step: float = 25):
        """Label/value pairs, bold label in the left column."""
        for label, value in rows:
            self._ensure_room(step)
            self._add(label, LABEL_X, self.y, font=BOLD, size=size)
            self._add(value, VALUE_X, self.y, size=size)
            self.y += step

    def grid(self, table: Sequence[Sequence[object]], size: float = 10, step: float = 20):
        """Fixed-width columns; the first row is the header."""
        for index, row in enumerate(table):
            self._ensure_room(step)
            for column, cell in enumerate(row):
                self._add(cell, LABEL_X + column * COLUMN_WIDTH, self.y,
                          font=BOLD if index == 0 else REGULAR, size=size)
            self.y += step

    def lines(self, lines: Iterable[str], size: float = 10, step: float = 20):
        for line in lines:
            self._ensure_room(step)
            self._add(line, LABEL_X, self.y, size=size)
            self.y += step

    def build(self, footer: str) -> DocumentLayout:
        """Finish the document, stamping ``footer`` on every page."""
        for page in range(self.layout.page_count):
            self.layout.elements.append(
                TextElement(text=footer, x=MARGIN, y=FOOTER_Y, page=page, size=10, align="right")
            )
        return self.layout


def display(value) -> str:
    """Text for a cell. ``None`` becomes the placeholder, blank strings stay blank."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
