"""View listener port - where derived editor state is delivered.

The presentation layer implements this protocol. The core never touches
widgets; it publishes complete immutable view states and discrete
notices, one way, from store change to listener.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.application.dtos.editor_view import EditorViewState, Notice


class EditorViewListener(Protocol):
    """Receives editor view updates."""

    def render(self, state: EditorViewState) -> None:
        """Replace whatever is displayed with ``state``."""
        ...

    def notify(self, notice: Notice) -> None:
        """Show a one-off notice (bloc deleted, time's up, store error)."""
        ...
