"""Pure domain services for Resolution Desk."""

from src.domain.services.countdown import (
    compute_remaining,
    elapsed_seconds,
    format_remaining,
    is_expired_at,
    pause_timer_state,
)
from src.domain.services.editing_permission import can_edit
from src.domain.services.resolution_text import render_export_document, render_resolution_text

__all__: list[str] = [
    "can_edit",
    "compute_remaining",
    "elapsed_seconds",
    "format_remaining",
    "is_expired_at",
    "pause_timer_state",
    "render_export_document",
    "render_resolution_text",
]
