"""Editor session orchestrator.

EditorSession owns the lifecycle of one logged-in user: the immutable
SessionContext, the live subscriptions, the timer poller and the view
projector. Every user action goes through it and is delegated to the
service responsible for that mutation.

Mutations never touch the view directly. A successful write is only
visible once the store notifies the subscription, which is what
updates every observer, the initiating session included.

Lifecycle:
    login_chair() / login_delegate()
        -> subscriptions: committee, bloc list (+ bloc, comments)
    select_bloc()  (chair)
        -> bloc and comment subscriptions replaced
    logout()
        -> every subscription closed, poller cancelled, context dropped
"""

from __future__ import annotations

from dataclasses import replace

from src.application.dtos.editor_view import EditorViewState, Notice, NoticeKind
from src.application.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)
from src.application.ports.view_listener import EditorViewListener
from src.application.services.base import LoggingMixin
from src.application.services.bloc_registry_service import BlocRegistryService
from src.application.services.comment_service import CommentService
from src.application.services.document_gateway import DocumentGateway
from src.application.services.editing_lock_service import EditingLockService
from src.application.services.editor_view_projector import EditorViewProjector
from src.application.services.login_service import LoginService
from src.application.services.resolution_service import (
    ClauseInsertResult,
    MutationOutcome,
    ResolutionService,
)
from src.application.services.subscription_manager import ResourceKind, SubscriptionManager
from src.application.services.timer_service import TimerCommandResult, TimerService
from src.application.services.timer_ticker import DEFAULT_TICK_INTERVAL_SECONDS, TimerTicker
from src.domain.errors.session import (
    NoActiveBlocError,
    NoActiveCommitteeError,
    SessionSupersededError,
)
from src.domain.errors.validation import InvalidInputError
from src.domain.models.bloc import Bloc, BlocSummary, normalize_bloc_name
from src.domain.models.comment import Comment
from src.domain.models.committee import Committee, CommitteeId
from src.domain.models.resolution import ClauseKind, ResolutionHeader
from src.domain.models.session import Role, SessionContext
from src.domain.models.timer import TimerState
from src.domain.services.resolution_text import render_export_document


class EditorSession(LoggingMixin):
    """One user's editing session.

    Example:
        >>> editor = create_editor_session(listener)
        >>> await editor.login_delegate("unep", "un#p26", "Alpha", "pw1")
        >>> await editor.insert_clause("Urges", ClauseKind.OPERATIVE)
        >>> editor.view.resolution_text
        '1. _Urges_.'
        >>> await editor.logout()
    """

    def __init__(
        self,
        gateway: DocumentGateway,
        login: LoginService,
        registry: BlocRegistryService,
        resolutions: ResolutionService,
        locks: EditingLockService,
        timers: TimerService,
        comments: CommentService,
        projector: EditorViewProjector,
        subscriptions: SubscriptionManager | None = None,
        poll_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the session (logged out).

        Args:
            gateway: Typed document store access.
            login: Credential checks and anonymous sign-in.
            registry: Bloc creation, joining and listing.
            resolutions: Clause and header writes.
            locks: Editing lock toggling.
            timers: Timer commands.
            comments: Chair comments.
            projector: Derived view state publisher.
            subscriptions: Subscription bookkeeping (a fresh one by default).
            poll_interval_seconds: Timer display polling interval.
        """
        self._gateway = gateway
        self._login = login
        self._registry = registry
        self._resolutions = resolutions
        self._locks = locks
        self._timers = timers
        self._comments = comments
        self._projector = projector
        self._subscriptions = subscriptions or SubscriptionManager()
        self._ticker = TimerTicker(self._tick, poll_interval_seconds)
        self._context: SessionContext | None = None
        self._correlation_id: str | None = None
        # Bumped by every login and logout; awaits compare against it.
        self._epoch = 0
        self._init_logger()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def context(self) -> SessionContext | None:
        """The logged-in session, or None."""
        return self._context

    @property
    def view(self) -> EditorViewState:
        """The current derived view state."""
        return self._projector.current

    @property
    def subscriptions(self) -> SubscriptionManager:
        """Live subscription bookkeeping."""
        return self._subscriptions

    @property
    def ticker(self) -> TimerTicker:
        """Timer display poller."""
        return self._ticker

    def add_listener(self, listener: EditorViewListener) -> None:
        """Register a view listener."""
        self._projector.add_listener(listener)

    def remove_listener(self, listener: EditorViewListener) -> None:
        """Unregister a view listener."""
        self._projector.remove_listener(listener)

    def require_context(self) -> SessionContext:
        """Return the logged-in session.

        Raises:
            NoActiveCommitteeError: If nobody is logged in.
        """
        if self._context is None:
            raise NoActiveCommitteeError("Please log in first")
        if self._correlation_id is not None:
            set_correlation_id(self._correlation_id)
        return self._context

    # =========================================================================
    # Login / logout
    # =========================================================================

    async def login_chair(
        self,
        committee: str | CommitteeId,
        committee_passphrase: str,
        chair_passphrase: str,
    ) -> SessionContext:
        """Log in as the committee chair.

        Raises:
            InvalidCredentialsError: If either passphrase is wrong.
            IdentityUnavailableError: If anonymous sign-in fails.
            StoreUnavailableError: If the committee cannot be loaded.
            SessionSupersededError: If a logout or another login started
                before this login completed.
        """
        committee_id = self._login.verify_committee(committee, committee_passphrase)
        self._login.verify_chair(chair_passphrase)
        epoch = await self._prepare_login()

        user_id = await self._login.sign_in()
        self._ensure_current(epoch, "login_chair")
        await self._gateway.ensure_committee(committee_id)
        self._ensure_current(epoch, "login_chair")
        context = SessionContext(user_id=user_id, role=Role.CHAIR, committee=committee_id)
        self._activate(context)
        return context

    async def login_delegate(
        self,
        committee: str | CommitteeId,
        committee_passphrase: str,
        bloc: str,
        bloc_password: str,
    ) -> SessionContext:
        """Log in as a delegate and join ``bloc``.

        Raises:
            InvalidCredentialsError: If the committee passphrase is wrong,
                or the bloc is absent or its password is wrong.
            InvalidInputError: If the bloc name or password is blank.
            IdentityUnavailableError: If anonymous sign-in fails.
            StoreUnavailableError: If the store fails.
            SessionSupersededError: If a logout or another login started
                before this login completed.
        """
        committee_id = self._login.verify_committee(committee, committee_passphrase)
        if not bloc.strip() or not bloc_password:
            raise InvalidInputError("bloc", "Please select a bloc and enter its password")
        epoch = await self._prepare_login()

        user_id = await self._login.sign_in()
        self._ensure_current(epoch, "login_delegate")
        await self._gateway.ensure_committee(committee_id)
        self._ensure_current(epoch, "login_delegate")
        joined = await self._registry.join_bloc(committee_id, bloc, bloc_password, user_id)
        self._ensure_current(epoch, "login_delegate")
        context = SessionContext(
            user_id=user_id,
            role=Role.DELEGATE,
            committee=committee_id,
            bloc=joined.name,
        )
        self._activate(context)
        return context

    async def logout(self) -> None:
        """End the session: close every subscription and stop polling.

        Calling logout while logged out is a no-op.
        """
        self._epoch += 1
        if self._context is None:
            return
        log = self._log_operation(
            "logout",
            committee=self._context.committee.value,
            role=self._context.role.value,
        )
        self._subscriptions.close_all()
        await self._ticker.aclose()
        self._context = None
        self._projector.reset()
        self._correlation_id = None
        log.info("logged_out")

    async def list_blocs(self, committee: str | CommitteeId) -> tuple[BlocSummary, ...]:
        """Bloc names and member counts for the login screen.

        Raises:
            InvalidInputError: If the committee is unknown.
        """
        try:
            committee_id = CommitteeId.parse(committee)
        except ValueError:
            raise InvalidInputError("committee", f"Unknown committee '{committee}'") from None
        return await self._registry.list_blocs(committee_id)

    # =========================================================================
    # Blocs
    # =========================================================================

    async def create_bloc(self, name: str, password: str) -> Bloc:
        """Create a bloc in the session's committee.

        Raises:
            NoActiveCommitteeError: If nobody is logged in.
            InvalidInputError: If the name or password is blank.
            NameTakenError: If the name is already used in the committee.
        """
        context = self.require_context()
        return await self._registry.create_bloc(context.committee, name, password)

    async def select_bloc(self, name: str | None) -> None:
        """Chair: view ``name``, or clear the view when ``name`` is None.

        Re-selecting the bloc already on display keeps its subscriptions.
        A selection overtaken by a logout or a new login is dropped.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            NoActiveBlocError: If the bloc does not exist.
        """
        context = self.require_context()
        context.require_chair("select_bloc")
        log = self._log_operation("select_bloc", committee=context.committee.value, bloc=name)

        if name is None:
            self._close_bloc_subscriptions()
            self._set_context(replace(context, selected_bloc=None))
            self._projector.clear_bloc()
            log.info("bloc_deselected")
            return

        bloc_name = normalize_bloc_name(name)
        if bloc_name == context.selected_bloc:
            return
        epoch = self._epoch
        exists = await self._gateway.get_bloc(context.committee, bloc_name) is not None
        if epoch != self._epoch or self._context is None:
            log.info("bloc_selection_superseded")
            return
        if not exists:
            raise NoActiveBlocError(f"Bloc '{bloc_name}' does not exist")

        context = self._context
        if bloc_name == context.selected_bloc:
            return
        self._set_context(replace(context, selected_bloc=bloc_name))
        self._projector.clear_bloc()
        self._open_bloc_subscriptions(context.committee, bloc_name)
        log.info("bloc_selected")

    # =========================================================================
    # Actions
    # =========================================================================

    async def insert_clause(self, clause: str, kind: ClauseKind) -> ClauseInsertResult:
        """Append a clause to the active bloc's resolution."""
        return await self._resolutions.insert_clause(self.require_context(), clause, kind)

    async def save_header_fields(
        self,
        forum: str,
        question_of: str,
        submitted_by: str,
        co_submitted_by: str,
    ) -> MutationOutcome:
        """Replace the four header fields (silently skipped while locked)."""
        header = ResolutionHeader(
            forum=forum,
            question_of=question_of,
            submitted_by=submitted_by,
            co_submitted_by=co_submitted_by,
        )
        return await self._resolutions.save_header_fields(self.require_context(), header)

    async def toggle_lock(self) -> bool:
        """Chair: flip the committee's editing lock."""
        return await self._locks.toggle_lock(self.require_context())

    async def set_timer(self, minutes: int | str | None, seconds: int | str | None) -> TimerState:
        """Chair: set the timer duration."""
        return await self._timers.set_timer(self.require_context(), minutes, seconds)

    async def start_timer(self) -> TimerCommandResult:
        """Chair: start the countdown."""
        return await self._timers.start_timer(self.require_context())

    async def pause_timer(self) -> TimerCommandResult:
        """Chair: pause the countdown."""
        return await self._timers.pause_timer(self.require_context())

    async def reset_timer(self) -> None:
        """Chair: reset the timer to zero."""
        await self._timers.reset_timer(self.require_context())

    async def add_comment(self, text: str) -> str:
        """Chair: comment on the selected bloc."""
        return await self._comments.add_comment(self.require_context(), text)

    async def export_resolution(self) -> str:
        """Printable document for the active bloc's resolution.

        Raises:
            NoActiveBlocError: If there is no active bloc or it was deleted.
        """
        context = self.require_context()
        bloc_name = context.require_active_bloc()
        bloc = await self._gateway.get_bloc(context.committee, bloc_name)
        if bloc is None:
            raise NoActiveBlocError(f"Bloc '{bloc_name}' no longer exists")
        return render_export_document(bloc.name, bloc.resolution)

    # =========================================================================
    # Subscription callbacks
    # =========================================================================

    def _on_committee(self, committee: Committee | None) -> None:
        self._projector.apply_committee(committee)
        if committee is not None and committee.timer.is_running:
            self._ticker.start()
        else:
            self._ticker.cancel()

    def _on_blocs(self, blocs: tuple[BlocSummary, ...]) -> None:
        self._projector.apply_blocs(blocs)

    def _on_bloc(self, bloc: Bloc | None) -> None:
        if bloc is None:
            self._handle_bloc_deleted()
            return
        self._projector.apply_bloc(bloc)

    def _on_comments(self, comments: tuple[Comment, ...]) -> None:
        self._projector.apply_comments(comments)

    def _on_subscription_error(self, error: Exception) -> None:
        self._log.error("subscription_failed", error=str(error), error_type=type(error).__name__)
        self._projector.notify(
            Notice(
                kind=NoticeKind.STORE_UNAVAILABLE,
                title="Connection problem",
                message=str(error) or "Live updates are unavailable",
            )
        )

    def _handle_bloc_deleted(self) -> None:
        context = self._context
        if context is None:
            return
        bloc_name = context.active_bloc
        self._log_operation(
            "bloc_deleted",
            committee=context.committee.value,
            bloc=bloc_name,
        ).warning("active_bloc_deleted")
        self._close_bloc_subscriptions()
        self._set_context(context.without_bloc())
        self._projector.clear_bloc()
        self._projector.notify(
            Notice(
                kind=NoticeKind.BLOC_DELETED,
                title="Bloc removed",
                message=f"Bloc '{bloc_name}' no longer exists",
            )
        )

    async def _tick(self) -> None:
        context = self._context
        if context is None:
            return
        state = self._projector.refresh_timer()
        if not state.timer.is_running or state.timer_remaining_seconds > 0:
            return
        if await self._timers.mark_expired(context.committee) and context.is_chair:
            self._projector.notify(
                Notice(
                    kind=NoticeKind.TIMER_EXPIRED,
                    title="Time's up!",
                    message="The committee timer has expired",
                )
            )

    # =========================================================================
    # Internals
    # =========================================================================

    async def _prepare_login(self) -> int:
        await self.logout()
        self._epoch += 1
        self._correlation_id = generate_correlation_id()
        set_correlation_id(self._correlation_id)
        return self._epoch

    def _ensure_current(self, epoch: int, operation: str) -> None:
        if epoch != self._epoch:
            self._log_operation(operation).info("login_superseded")
            raise SessionSupersededError(f"{operation} was superseded by a newer session change")

    def _activate(self, context: SessionContext) -> None:
        self._set_context(context)
        committee = context.committee
        self._subscriptions.replace(
            ResourceKind.COMMITTEE,
            committee.value,
            lambda handle: self._gateway.watch_committee(
                committee,
                handle.wrap(self._on_committee),
                handle.wrap(self._on_subscription_error),
            ),
        )
        self._subscriptions.replace(
            ResourceKind.BLOC_LIST,
            committee.value,
            lambda handle: self._gateway.watch_blocs(
                committee,
                handle.wrap(self._on_blocs),
                handle.wrap(self._on_subscription_error),
            ),
        )
        if context.active_bloc is not None:
            self._open_bloc_subscriptions(committee, context.active_bloc)
        self._log_operation(
            "login",
            committee=committee.value,
            role=context.role.value,
            user_id=context.user_id,
            bloc=context.active_bloc,
        ).info("logged_in")

    def _open_bloc_subscriptions(self, committee: CommitteeId, bloc_name: str) -> None:
        resource_id = f"{committee.value}/{bloc_name}"
        self._subscriptions.replace(
            ResourceKind.BLOC,
            resource_id,
            lambda handle: self._gateway.watch_bloc(
                committee,
                bloc_name,
                handle.wrap(self._on_bloc),
                handle.wrap(self._on_subscription_error),
            ),
        )
        if self._context is None or self._context.active_bloc != bloc_name:
            # Bloc vanished during the initial delivery.
            return
        self._subscriptions.replace(
            ResourceKind.COMMENTS,
            resource_id,
            lambda handle: self._gateway.watch_comments(
                committee,
                bloc_name,
                handle.wrap(self._on_comments),
                handle.wrap(self._on_subscription_error),
            ),
        )

    def _close_bloc_subscriptions(self) -> None:
        self._subscriptions.close(ResourceKind.BLOC)
        self._subscriptions.close(ResourceKind.COMMENTS)

    def _set_context(self, context: SessionContext | None) -> None:
        self._context = context
        self._projector.apply_session(context)
