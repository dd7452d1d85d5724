"""Derived editor view state published to the presentation layer.

An EditorViewState is always rebuilt in full from the latest payload of
every subscription; it is never patched incrementally. Two states built
from identical payloads compare equal, which lets the projector skip
redundant renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.domain.models.bloc import BlocSummary
from src.domain.models.comment import Comment
from src.domain.models.resolution import ResolutionHeader
from src.domain.models.session import SessionContext
from src.domain.models.timer import TimerState


class NoticeKind(str, Enum):
    """Kinds of one-off notices."""

    BLOC_DELETED = "bloc_deleted"
    TIMER_EXPIRED = "timer_expired"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class Notice:
    """A one-off, user-visible event (rendered as a modal by the UI).

    Attributes:
        kind: What happened.
        title: Short heading.
        message: Longer explanation.
    """

    kind: NoticeKind
    title: str
    message: str


@dataclass(frozen=True)
class EditorViewState:
    """Everything the editor screen displays.

    Attributes:
        session: The logged-in session, or None after logout.
        committee_loaded: Whether a committee snapshot has arrived.
        is_editing_locked: Committee-wide lock flag.
        can_edit: Whether this session may change resolution content.
        timer: Last persisted timer state.
        timer_remaining_seconds: Remaining time at projection time.
        timer_display: ``MM:SS`` rendering of the remaining time.
        blocs: Bloc summaries sorted by name.
        bloc_name: Name of the bloc being displayed, if any.
        header: Header fields of the displayed resolution.
        resolution_text: Rendered clause body.
        comments: Comments on the displayed bloc, oldest first.
    """

    session: SessionContext | None = None
    committee_loaded: bool = False
    is_editing_locked: bool = False
    can_edit: bool = False
    timer: TimerState = field(default_factory=TimerState)
    timer_remaining_seconds: int = 0
    timer_display: str = "00:00"
    blocs: tuple[BlocSummary, ...] = ()
    bloc_name: str | None = None
    header: ResolutionHeader = field(default_factory=ResolutionHeader)
    resolution_text: str = ""
    comments: tuple[Comment, ...] = ()

    @classmethod
    def empty(cls) -> EditorViewState:
        """Placeholder state shown before login and after logout."""
        return cls()
