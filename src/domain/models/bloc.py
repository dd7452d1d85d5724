"""Bloc record: a sub-group of a committee co-authoring one resolution.

Blocs are protected by a shared password compared in plaintext. This is
a known weakness of the login model and is kept deliberately simple;
membership is an append-only set of user identities.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domain.errors.validation import InvalidInputError
from src.domain.models.document_fields import (
    optional_str_list,
    require_mapping,
    require_str,
)
from src.domain.models.resolution import Resolution
from src.domain.models.session import UserId

BLOC_KIND = "bloc"


def normalize_bloc_name(name: str) -> str:
    """Strip and validate a bloc name.

    Bloc names become document path segments, so they may not be blank
    or contain ``/``.

    Raises:
        InvalidInputError: If the name is blank or contains a slash.
    """
    cleaned = name.strip()
    if not cleaned:
        raise InvalidInputError("bloc_name", "Please enter a bloc name")
    if "/" in cleaned:
        raise InvalidInputError("bloc_name", "Bloc names may not contain '/'")
    return cleaned


@dataclass(frozen=True)
class BlocSummary:
    """Public view of a bloc (never includes the password)."""

    name: str
    member_count: int


@dataclass(frozen=True)
class Bloc:
    """A bloc and its resolution.

    Attributes:
        name: Bloc name, unique within its committee.
        password: Shared secret checked when delegates join.
        members: User ids of delegates who joined, without duplicates.
        resolution: The bloc's draft resolution.
    """

    name: str
    password: str
    members: tuple[UserId, ...] = ()
    resolution: Resolution = field(default_factory=Resolution)

    @classmethod
    def create(cls, name: str, password: str) -> Bloc:
        """Build a new bloc with no members and a blank resolution."""
        return cls(name=name, password=password)

    def accepts_password(self, candidate: str) -> bool:
        """Check a join attempt against the stored password."""
        return hmac.compare_digest(self.password.encode("utf-8"), candidate.encode("utf-8"))

    def has_member(self, user_id: UserId) -> bool:
        """True if ``user_id`` already joined this bloc."""
        return user_id in self.members

    @property
    def summary(self) -> BlocSummary:
        """Password-free summary for bloc listings."""
        return BlocSummary(name=self.name, member_count=len(self.members))

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted map shape."""
        return {
            "password": self.password,
            "members": list(self.members),
            "resolution": self.resolution.to_document(),
        }

    @classmethod
    def from_document(cls, name: str, data: Mapping[str, Any]) -> Bloc:
        """Decode a persisted bloc document.

        Raises:
            MalformedDocumentError: If the password or resolution is
                missing, or a field has the wrong type.
        """
        document = require_mapping(data, BLOC_KIND)
        return cls(
            name=name,
            password=require_str(document, BLOC_KIND, "password"),
            members=tuple(
                UserId(member) for member in optional_str_list(document, BLOC_KIND, "members")
            ),
            resolution=Resolution.from_document(require_mapping(document, BLOC_KIND, "resolution")),
        )
