"""Domain models for Resolution Desk.

Contains the tagged records exchanged with the document store. These
models are immutable and contain no infrastructure dependencies.
"""

from src.domain.models.bloc import Bloc, BlocSummary, normalize_bloc_name
from src.domain.models.comment import Comment, order_comments
from src.domain.models.committee import Committee, CommitteeId
from src.domain.models.resolution import (
    ClauseKind,
    Resolution,
    ResolutionHeader,
    format_clause,
)
from src.domain.models.session import Role, SessionContext, UserId
from src.domain.models.timer import TimerState

__all__: list[str] = [
    "Bloc",
    "BlocSummary",
    "ClauseKind",
    "Comment",
    "Committee",
    "CommitteeId",
    "Resolution",
    "ResolutionHeader",
    "Role",
    "SessionContext",
    "TimerState",
    "UserId",
    "format_clause",
    "normalize_bloc_name",
    "order_comments",
]
