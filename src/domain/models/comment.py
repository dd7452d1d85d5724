"""Chair comments left on a bloc's resolution.

Comments form an append-only log ordered by their server-assigned
timestamp. A comment whose timestamp has not been resolved yet sorts
first.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.domain.models.document_fields import optional_timestamp, require_mapping, require_str
from src.domain.models.session import UserId

COMMENT_KIND = "comment"

_UNRESOLVED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Comment:
    """One chair comment.

    Attributes:
        comment_id: Document id within the bloc's comments collection.
        text: The comment body.
        chair: Identity of the chair who wrote it.
        timestamp: Server-assigned creation time (None while pending).
    """

    comment_id: str
    text: str
    chair: UserId
    timestamp: datetime | None = None

    @staticmethod
    def new_document(text: str, chair: UserId, timestamp_marker: object) -> dict[str, Any]:
        """Build the document for a new comment.

        Args:
            text: Comment body.
            chair: Author identity.
            timestamp_marker: The store's server-timestamp sentinel.
        """
        return {"text": text, "chair": chair, "timestamp": timestamp_marker}

    @classmethod
    def from_document(cls, comment_id: str, data: Mapping[str, Any]) -> Comment:
        """Decode a persisted comment document.

        Raises:
            MalformedDocumentError: If text or chair is missing.
        """
        document = require_mapping(data, COMMENT_KIND)
        return cls(
            comment_id=comment_id,
            text=require_str(document, COMMENT_KIND, "text"),
            chair=UserId(require_str(document, COMMENT_KIND, "chair")),
            timestamp=optional_timestamp(document, COMMENT_KIND, "timestamp"),
        )


def order_comments(comments: Iterable[Comment]) -> tuple[Comment, ...]:
    """Sort comments by timestamp ascending, ties broken by id."""
    return tuple(
        sorted(comments, key=lambda comment: (comment.timestamp or _UNRESOLVED, comment.comment_id))
    )
