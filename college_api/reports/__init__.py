from .documents import (
    RenderedDocument, FeeSummary, compute_fee_summary,
    build_hall_ticket_layout, build_result_layout, build_fee_structure_layout,
    render_hall_ticket, render_result, render_fee_structure
)
from .layout import DocumentLayout, LayoutBuilder, TextElement

__all__ = [
    "RenderedDocument", "FeeSummary", "compute_fee_summary",
    "build_hall_ticket_layout", "build_result_layout", "build_fee_structure_layout",
    "render_hall_ticket", "render_result", "render_fee_structure",
    "DocumentLayout", "LayoutBuilder", "TextElement",
]
