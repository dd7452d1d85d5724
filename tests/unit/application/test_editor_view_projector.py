"""Unit tests for EditorViewProjector."""

from datetime import datetime, timezone

import pytest

from src.application.dtos.editor_view import EditorViewState, Notice, NoticeKind
from src.application.services.editor_view_projector import EditorViewProjector
from src.domain.models.bloc import Bloc, BlocSummary
from src.domain.models.comment import Comment
from src.domain.models.committee import Committee, CommitteeId
from src.domain.models.resolution import Resolution, ResolutionHeader
from src.domain.models.session import Role, SessionContext, UserId
from src.domain.models.timer import TimerState
from tests.helpers import FakeTimeAuthority, RecordingListener

UNEP = CommitteeId.UNEP
DELEGATE = SessionContext(UserId("d-1"), Role.DELEGATE, UNEP, bloc="Alpha")
CHAIR = SessionContext(UserId("c-1"), Role.CHAIR, UNEP)

ALPHA = Bloc(
    name="Alpha",
    password="pw1",
    resolution=Resolution(forum="GA", operative_clauses=("1. _Urges_",)),
)


@pytest.fixture
def projector(fake_time: FakeTimeAuthority) -> EditorViewProjector:
    return EditorViewProjector(fake_time)


@pytest.fixture
def listener(projector: EditorViewProjector) -> RecordingListener:
    recorder = RecordingListener()
    projector.add_listener(recorder)
    return recorder


class TestListeners:
    """Tests for listener registration and publishing."""

    def test_renders_current_state_on_register(self, listener: RecordingListener) -> None:
        assert listener.states == [EditorViewState.empty()]

    def test_identical_payload_not_republished(
        self, projector: EditorViewProjector, listener: RecordingListener
    ) -> None:
        projector.apply_session(CHAIR)
        projector.apply_blocs((BlocSummary("Alpha", 0),))
        renders = len(listener.states)

        projector.apply_blocs((BlocSummary("Alpha", 0),))

        assert len(listener.states) == renders

    def test_remove_listener(
        self, projector: EditorViewProjector, listener: RecordingListener
    ) -> None:
        projector.remove_listener(listener)
        projector.remove_listener(listener)
        projector.apply_session(CHAIR)
        assert len(listener.states) == 1

    def test_notify(self, projector: EditorViewProjector, listener: RecordingListener) -> None:
        notice = Notice(NoticeKind.TIMER_EXPIRED, "Time's up!", "expired")
        projector.notify(notice)
        assert listener.notices == [notice]


class TestBuild:
    """Tests for the derived state."""

    def test_logged_out_is_empty(self, projector: EditorViewProjector) -> None:
        projector.apply_committee(Committee.initial(UNEP))
        assert projector.build() == EditorViewState.empty()

    def test_delegate_locked_cannot_edit(self, projector: EditorViewProjector) -> None:
        projector.apply_session(DELEGATE)
        projector.apply_committee(Committee(UNEP, is_editing_locked=True))

        state = projector.current
        assert state.committee_loaded
        assert state.is_editing_locked
        assert state.can_edit is False

    def test_chair_locked_can_edit(self, projector: EditorViewProjector) -> None:
        projector.apply_session(CHAIR)
        projector.apply_committee(Committee(UNEP, is_editing_locked=True))
        assert projector.current.can_edit is True

    def test_bloc_rendering(self, projector: EditorViewProjector) -> None:
        projector.apply_session(DELEGATE)
        projector.apply_bloc(ALPHA)

        state = projector.current
        assert state.bloc_name == "Alpha"
        assert state.header == ResolutionHeader(forum="GA")
        assert state.resolution_text == "1. _Urges_."

    def test_clear_bloc_reverts_placeholders(self, projector: EditorViewProjector) -> None:
        comment = Comment("c1", "Nice", UserId("c-1"), datetime(2026, 3, 1, tzinfo=timezone.utc))
        projector.apply_session(DELEGATE)
        projector.apply_bloc(ALPHA)
        projector.apply_comments((comment,))
        assert projector.current.comments == (comment,)

        projector.clear_bloc()

        state = projector.current
        assert state.bloc_name is None
        assert state.resolution_text == ""
        assert state.header == ResolutionHeader()
        assert state.comments == ()

    def test_comments_hidden_without_bloc(self, projector: EditorViewProjector) -> None:
        comment = Comment("c1", "Nice", UserId("c-1"), None)
        projector.apply_session(CHAIR)
        projector.apply_comments((comment,))
        assert projector.current.comments == ()

    def test_timer_projection(
        self, projector: EditorViewProjector, fake_time: FakeTimeAuthority
    ) -> None:
        timer = TimerState(total_seconds=90, is_running=True, start_time=fake_time.now())
        projector.apply_session(CHAIR)
        projector.apply_committee(Committee(UNEP, timer=timer))
        assert projector.current.timer_display == "01:30"

        fake_time.advance(seconds=40)
        state = projector.refresh_timer()

        assert state.timer_remaining_seconds == 50
        assert state.timer_display == "00:50"

    def test_reset(self, projector: EditorViewProjector, listener: RecordingListener) -> None:
        projector.apply_session(CHAIR)
        projector.apply_committee(Committee.initial(UNEP))

        projector.reset()

        assert projector.current == EditorViewState.empty()
        assert listener.last == EditorViewState.empty()
