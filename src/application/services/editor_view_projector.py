"""Derived view state projection.

The projector keeps the latest payload of every subscription and
rebuilds the whole EditorViewState from them after each change. It
never patches state incrementally, so re-delivering an identical
payload yields an identical state, and listeners are only called when
the state actually changed.

Data flow:
    store change -> subscription callback -> apply_*() -> EditorViewState
    -> EditorViewListener.render()
"""

from __future__ import annotations

from src.application.dtos.editor_view import EditorViewState, Notice
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.ports.view_listener import EditorViewListener
from src.application.services.base import LoggingMixin
from src.domain.models.bloc import Bloc, BlocSummary
from src.domain.models.comment import Comment
from src.domain.models.committee import Committee
from src.domain.models.resolution import ResolutionHeader
from src.domain.models.session import SessionContext
from src.domain.models.timer import TimerState
from src.domain.services.countdown import compute_remaining, format_remaining
from src.domain.services.editing_permission import can_edit
from src.domain.services.resolution_text import render_resolution_text


class EditorViewProjector(LoggingMixin):
    """Builds and publishes EditorViewState for one editor session."""

    def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
        """Initialize the projector.

        Args:
            time_authority: Clock used to project the remaining time.
        """
        self._time = time_authority
        self._listeners: list[EditorViewListener] = []
        self._session: SessionContext | None = None
        self._committee: Committee | None = None
        self._blocs: tuple[BlocSummary, ...] = ()
        self._bloc: Bloc | None = None
        self._comments: tuple[Comment, ...] = ()
        self._state = EditorViewState.empty()
        self._init_logger(component="view")

    @property
    def current(self) -> EditorViewState:
        """The most recently published state."""
        return self._state

    def add_listener(self, listener: EditorViewListener) -> None:
        """Register a listener and render the current state to it."""
        self._listeners.append(listener)
        listener.render(self._state)

    def remove_listener(self, listener: EditorViewListener) -> None:
        """Unregister a listener (no-op if absent)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def reset(self) -> None:
        """Drop every payload and publish the empty state."""
        self._session = None
        self._committee = None
        self._blocs = ()
        self._bloc = None
        self._comments = ()
        self._publish()

    def apply_session(self, session: SessionContext | None) -> None:
        self._session = session
        self._publish()

    def apply_committee(self, committee: Committee | None) -> None:
        self._committee = committee
        self._publish()

    def apply_blocs(self, blocs: tuple[BlocSummary, ...]) -> None:
        self._blocs = blocs
        self._publish()

    def apply_bloc(self, bloc: Bloc | None) -> None:
        self._bloc = bloc
        self._publish()

    def apply_comments(self, comments: tuple[Comment, ...]) -> None:
        self._comments = comments
        self._publish()

    def clear_bloc(self) -> None:
        """Revert the bloc and comment panes to placeholders."""
        self._bloc = None
        self._comments = ()
        self._publish()

    def refresh_timer(self) -> EditorViewState:
        """Re-project the remaining time at the current instant."""
        self._publish()
        return self._state

    def notify(self, notice: Notice) -> None:
        """Forward a one-off notice to every listener."""
        self._log.info("notice_published", kind=notice.kind.value)
        for listener in list(self._listeners):
            listener.notify(notice)

    def build(self) -> EditorViewState:
        """Compute the view state from the latest payloads."""
        session = self._session
        if session is None:
            return EditorViewState.empty()

        committee = self._committee
        locked = committee.is_editing_locked if committee is not None else False
        timer = committee.timer if committee is not None else TimerState()
        remaining = compute_remaining(timer, self._time.now())

        bloc = self._bloc
        if bloc is not None:
            header = bloc.resolution.header
            text = render_resolution_text(bloc.resolution)
            comments = self._comments
        else:
            header = ResolutionHeader()
            text = ""
            comments = ()

        return EditorViewState(
            session=session,
            committee_loaded=committee is not None,
            is_editing_locked=locked,
            can_edit=can_edit(session.role, locked),
            timer=timer,
            timer_remaining_seconds=remaining,
            timer_display=format_remaining(remaining),
            blocs=self._blocs,
            bloc_name=bloc.name if bloc is not None else None,
            header=header,
            resolution_text=text,
            comments=comments,
        )

    def _publish(self) -> None:
        state = self.build()
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener.render(state)
