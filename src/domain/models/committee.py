"""Committee record and the closed set of committee identifiers.

A committee document is created lazily on first access and never
deleted. It carries the committee-wide editing lock and the shared
countdown timer; blocs live in a sub-collection beneath it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.models.document_fields import optional_bool, require_mapping
from src.domain.models.timer import TimerState

COMMITTEE_KIND = "committee"


class CommitteeId(str, Enum):
    """Closed set of committees a session can log into."""

    UNEP = "unep"
    SECURITY = "security"
    ECOSOC = "ecosoc"
    UNESCO = "unesco"
    NATO = "nato"
    WHO = "who"
    HRC = "hrc"
    UNWOMEN = "unwomen"
    DISEC = "disec"

    @classmethod
    def parse(cls, value: str | CommitteeId) -> CommitteeId:
        """Resolve a committee identifier, case-insensitively.

        Args:
            value: Committee name or an existing CommitteeId.

        Returns:
            The matching CommitteeId.

        Raises:
            ValueError: If the name is not one of the known committees.
        """
        if isinstance(value, CommitteeId):
            return value
        return cls(value.strip().lower())


@dataclass(frozen=True)
class Committee:
    """Shared committee state observed by every session in the committee.

    Attributes:
        committee_id: Which committee this record belongs to.
        is_editing_locked: When True, delegates may not change resolutions.
        timer: The committee's countdown timer.
    """

    committee_id: CommitteeId
    is_editing_locked: bool = False
    timer: TimerState = field(default_factory=TimerState)

    @classmethod
    def initial(cls, committee_id: CommitteeId) -> Committee:
        """Build the record written when a committee is first accessed."""
        return cls(committee_id=committee_id)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted map shape."""
        return {
            "isEditingLocked": self.is_editing_locked,
            "timer": self.timer.to_document(),
        }

    @classmethod
    def from_document(cls, committee_id: CommitteeId, data: Mapping[str, Any]) -> Committee:
        """Decode a persisted committee document.

        A missing ``timer`` map decodes as an idle zero timer, matching
        documents created before the timer existed.

        Raises:
            MalformedDocumentError: If a field has the wrong shape.
        """
        document = require_mapping(data, COMMITTEE_KIND)
        timer_data = document.get("timer")
        timer = (
            TimerState()
            if timer_data is None
            else TimerState.from_document(require_mapping(document, COMMITTEE_KIND, "timer"))
        )
        return cls(
            committee_id=committee_id,
            is_editing_locked=optional_bool(document, COMMITTEE_KIND, "isEditingLocked"),
            timer=timer,
        )
