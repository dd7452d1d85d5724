"""Resolution document model.

A resolution has four header strings that are replaced as whole values,
and two append-only clause lists. Clauses are never reordered, edited in
place or deleted.

Stored clause formatting:
    preambulatory  ``*<clause>*``
    operative      ``<n>. _<clause>_`` where n is one plus the number of
                   operative clauses present when the clause is appended
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from src.domain.models.document_fields import optional_str, optional_str_list, require_mapping

RESOLUTION_KIND = "resolution"


class ClauseKind(str, Enum):
    """The two ordered sections of a resolution."""

    PREAMBULATORY = "preambulatory"
    OPERATIVE = "operative"

    @property
    def document_field(self) -> str:
        """Persisted list field holding clauses of this kind."""
        if self is ClauseKind.PREAMBULATORY:
            return "preambulatoryClauses"
        return "operativeClauses"


def format_clause(clause: str, kind: ClauseKind, existing_count: int) -> str:
    """Format a clause the way it is stored in the resolution document.

    Args:
        clause: The clause phrase as chosen by the user.
        kind: Which section the clause is appended to.
        existing_count: How many clauses of ``kind`` already exist.

    Returns:
        The stored representation of the clause.
    """
    if kind is ClauseKind.PREAMBULATORY:
        return f"*{clause}*"
    return f"{existing_count + 1}. _{clause}_"


@dataclass(frozen=True)
class ResolutionHeader:
    """The four whole-value header fields of a resolution."""

    forum: str = ""
    question_of: str = ""
    submitted_by: str = ""
    co_submitted_by: str = ""

    def to_update_fields(self, prefix: str = "resolution") -> dict[str, str]:
        """Return dotted-path update fields replacing all four values."""
        return {
            f"{prefix}.forum": self.forum,
            f"{prefix}.questionOf": self.question_of,
            f"{prefix}.submittedBy": self.submitted_by,
            f"{prefix}.coSubmittedBy": self.co_submitted_by,
        }


@dataclass(frozen=True)
class Resolution:
    """A bloc's draft resolution.

    Attributes:
        forum: Forum the resolution is submitted to.
        question_of: Question the resolution addresses.
        submitted_by: Main submitters.
        co_submitted_by: Co-submitters.
        preambulatory_clauses: Stored preambulatory clauses, in order.
        operative_clauses: Stored operative clauses, in order.
    """

    forum: str = ""
    question_of: str = ""
    submitted_by: str = ""
    co_submitted_by: str = ""
    preambulatory_clauses: tuple[str, ...] = ()
    operative_clauses: tuple[str, ...] = ()

    @property
    def header(self) -> ResolutionHeader:
        """The four header fields as one value."""
        return ResolutionHeader(
            forum=self.forum,
            question_of=self.question_of,
            submitted_by=self.submitted_by,
            co_submitted_by=self.co_submitted_by,
        )

    def clauses(self, kind: ClauseKind) -> tuple[str, ...]:
        """Return the stored clauses of one section."""
        if kind is ClauseKind.PREAMBULATORY:
            return self.preambulatory_clauses
        return self.operative_clauses

    def with_clause(self, clause: str, kind: ClauseKind) -> tuple[Resolution, str]:
        """Append a formatted clause, returning the new resolution and stored text.

        Existing clauses are untouched; the chosen list grows by exactly one.
        """
        current = self.clauses(kind)
        stored = format_clause(clause, kind, len(current))
        if kind is ClauseKind.PREAMBULATORY:
            return replace(self, preambulatory_clauses=current + (stored,)), stored
        return replace(self, operative_clauses=current + (stored,)), stored

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted map shape."""
        return {
            "forum": self.forum,
            "questionOf": self.question_of,
            "submittedBy": self.submitted_by,
            "coSubmittedBy": self.co_submitted_by,
            "preambulatoryClauses": list(self.preambulatory_clauses),
            "operativeClauses": list(self.operative_clauses),
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> Resolution:
        """Decode a persisted resolution map.

        Missing header strings decode as empty and missing clause lists
        as empty; present values must have the right type.

        Raises:
            MalformedDocumentError: If a field has the wrong type.
        """
        document = require_mapping(data, RESOLUTION_KIND)
        return cls(
            forum=optional_str(document, RESOLUTION_KIND, "forum"),
            question_of=optional_str(document, RESOLUTION_KIND, "questionOf"),
            submitted_by=optional_str(document, RESOLUTION_KIND, "submittedBy"),
            co_submitted_by=optional_str(document, RESOLUTION_KIND, "coSubmittedBy"),
            preambulatory_clauses=optional_str_list(
                document, RESOLUTION_KIND, "preambulatoryClauses"
            ),
            operative_clauses=optional_str_list(document, RESOLUTION_KIND, "operativeClauses"),
        )
