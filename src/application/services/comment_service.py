"""Chair comments on a bloc's resolution.

Comments form an append-only log under the bloc document. Each comment
is stamped by the store's server clock so all observers agree on order.
"""

from __future__ import annotations

import uuid

from src.application.services.base import LoggingMixin
from src.application.services.document_gateway import DocumentGateway
from src.domain.errors.session import NoActiveBlocError
from src.domain.errors.store import StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.comment import Comment
from src.domain.models.session import SessionContext


class CommentService(LoggingMixin):
    """Appends chair comments to the selected bloc."""

    def __init__(self, gateway: DocumentGateway) -> None:
        self._gateway = gateway
        self._init_logger(component="comments")

    async def add_comment(self, session: SessionContext, text: str) -> str:
        """Add a comment to the chair's selected bloc.

        Args:
            session: The acting chair session.
            text: Comment body; surrounding whitespace is stripped.

        Returns:
            The new comment's id.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            NoActiveBlocError: If no bloc is selected or it no longer exists.
            InvalidInputError: If the text is blank.
            StoreUnavailableError: If the read or write fails.
        """
        session.require_chair("add_comment")
        bloc_name = session.require_active_bloc()
        body = text.strip()
        if not body:
            raise InvalidInputError("comment", "Please enter a comment")

        comment_id = uuid.uuid4().hex
        log = self._log_operation(
            "add_comment",
            committee=session.committee.value,
            bloc=bloc_name,
            comment_id=comment_id,
        )

        try:
            if await self._gateway.get_bloc(session.committee, bloc_name) is None:
                raise NoActiveBlocError(f"Bloc '{bloc_name}' no longer exists")
            await self._gateway.add_comment(
                session.committee,
                bloc_name,
                comment_id,
                Comment.new_document(body, session.user_id, self._gateway.server_timestamp()),
            )
        except StoreUnavailableError as exc:
            log.error("comment_add_failed", error=str(exc))
            raise

        log.info("comment_added")
        return comment_id
