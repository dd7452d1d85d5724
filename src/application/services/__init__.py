"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with the document store and identity ports.

Available services:
- DocumentGateway: Typed boundary over the document store
- SubscriptionManager: One live subscription per resource kind
- ResolutionService: Clause insertion and header saves under the lock
- EditingLockService: Chair-only lock toggling
- TimerService: Timer state transitions
- TimerTicker: Countdown display polling
- CommentService: Chair comments on a bloc
- BlocRegistryService: Bloc creation, joining and listing
- LoginService: Passphrase checks and anonymous sign-in
- EditorViewProjector: Derived view state publishing
- EditorSession: Per-user session orchestrator
"""

from src.application.services.base import LoggingMixin
from src.application.services.bloc_registry_service import BlocRegistryService
from src.application.services.comment_service import CommentService
from src.application.services.document_gateway import (
    DocumentGateway,
    bloc_path,
    blocs_collection_path,
    comment_path,
    comments_collection_path,
    committee_path,
)
from src.application.services.editing_lock_service import EditingLockService
from src.application.services.editor_session import EditorSession
from src.application.services.editor_view_projector import EditorViewProjector
from src.application.services.login_service import LoginService
from src.application.services.resolution_service import (
    ClauseInsertResult,
    MutationOutcome,
    ResolutionService,
)
from src.application.services.subscription_manager import (
    ResourceKind,
    SubscriptionHandle,
    SubscriptionManager,
)
from src.application.services.timer_service import (
    TimerCommandResult,
    TimerService,
    parse_duration_part,
)
from src.application.services.timer_ticker import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    TimerTicker,
)

__all__ = [
    "DEFAULT_TICK_INTERVAL_SECONDS",
    "BlocRegistryService",
    "ClauseInsertResult",
    "CommentService",
    "DocumentGateway",
    "EditingLockService",
    "EditorSession",
    "EditorViewProjector",
    "LoggingMixin",
    "LoginService",
    "MutationOutcome",
    "ResolutionService",
    "ResourceKind",
    "SubscriptionHandle",
    "SubscriptionManager",
    "TimerCommandResult",
    "TimerService",
    "TimerTicker",
    "bloc_path",
    "blocs_collection_path",
    "comment_path",
    "comments_collection_path",
    "committee_path",
    "parse_duration_part",
]
