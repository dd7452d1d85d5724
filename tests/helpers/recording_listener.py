"""RecordingListener - captures everything an editor session publishes.

Implements EditorViewListener by appending every rendered state and
every notice to lists, so tests can assert on what a user would have
seen.

Usage:
    >>> listener = RecordingListener()
    >>> editor.add_listener(listener)
    >>> await editor.insert_clause("Urges", ClauseKind.OPERATIVE)
    >>> listener.last.resolution_text
    '1. _Urges_.'
"""

from __future__ import annotations

from src.application.dtos.editor_view import EditorViewState, Notice, NoticeKind


class RecordingListener:
    """View listener that records renders and notices."""

    def __init__(self) -> None:
        self.states: list[EditorViewState] = []
        self.notices: list[Notice] = []

    def render(self, state: EditorViewState) -> None:
        self.states.append(state)

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def last(self) -> EditorViewState:
        """Most recently rendered state."""
        return self.states[-1]

    def notices_of(self, kind: NoticeKind) -> list[Notice]:
        """Notices of one kind, in delivery order."""
        return [notice for notice in self.notices if notice.kind is kind]

    def clear(self) -> None:
        self.states.clear()
        self.notices.clear()
