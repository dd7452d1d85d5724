"""Domain errors for Resolution Desk.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ResolutionDeskError.

Policy rejections that are not failures (editing locked, timer already
running, no duration set) are modelled as outcome values, not errors.
"""

from src.domain.errors.bloc import NameTakenError
from src.domain.errors.identity import IdentityUnavailableError
from src.domain.errors.session import (
    InvalidCredentialsError,
    NoActiveBlocError,
    NoActiveCommitteeError,
    RoleNotPermittedError,
    SessionSupersededError,
)
from src.domain.errors.store import (
    DocumentNotFoundError,
    MalformedDocumentError,
    StoreUnavailableError,
    TransactionContentionError,
)
from src.domain.errors.validation import InvalidInputError

__all__: list[str] = [
    "DocumentNotFoundError",
    "IdentityUnavailableError",
    "InvalidCredentialsError",
    "InvalidInputError",
    "MalformedDocumentError",
    "NameTakenError",
    "NoActiveBlocError",
    "NoActiveCommitteeError",
    "RoleNotPermittedError",
    "SessionSupersededError",
    "StoreUnavailableError",
    "TransactionContentionError",
]
