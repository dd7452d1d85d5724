"""Bloc registry: creation, membership and listing.

Creation checks for an existing bloc with a read immediately before the
write. Bloc creation is infrequent and user-initiated, so the small
window between the read and the write is accepted.

Joining adds the user to the bloc's member set with an array-union
write, so repeated joins never duplicate the member.
"""

from __future__ import annotations

from src.application.services.base import LoggingMixin
from src.application.services.document_gateway import DocumentGateway
from src.domain.errors.bloc import NameTakenError
from src.domain.errors.session import InvalidCredentialsError
from src.domain.errors.store import DocumentNotFoundError, StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.bloc import Bloc, BlocSummary, normalize_bloc_name
from src.domain.models.committee import CommitteeId
from src.domain.models.session import UserId


class BlocRegistryService(LoggingMixin):
    """Create, join and list blocs within a committee.

    Example:
        >>> registry = BlocRegistryService(gateway)
        >>> await registry.create_bloc(CommitteeId.UNEP, "Alpha", "pw1")
        >>> await registry.join_bloc(CommitteeId.UNEP, "Alpha", "pw1", user_id)
    """

    def __init__(self, gateway: DocumentGateway) -> None:
        """Initialize the registry.

        Args:
            gateway: Typed document store access.
        """
        self._gateway = gateway
        self._init_logger(component="blocs")

    async def create_bloc(self, committee: CommitteeId, name: str, password: str) -> Bloc:
        """Create a bloc with no members and a blank resolution.

        Args:
            committee: Committee the bloc belongs to.
            name: Bloc name (stripped; may not be blank or contain '/').
            password: Shared secret delegates use to join.

        Returns:
            The created bloc.

        Raises:
            InvalidInputError: If the name or password is blank.
            NameTakenError: If a bloc with that name already exists.
            StoreUnavailableError: If the read or write fails.
        """
        bloc_name = normalize_bloc_name(name)
        if not password:
            raise InvalidInputError("bloc_password", "Please enter a bloc password")

        log = self._log_operation("create_bloc", committee=committee.value, bloc=bloc_name)
        try:
            if await self._gateway.get_bloc(committee, bloc_name) is not None:
                log.info("bloc_name_taken")
                raise NameTakenError(committee.value, bloc_name)
            bloc = Bloc.create(bloc_name, password)
            await self._gateway.create_bloc(committee, bloc)
        except StoreUnavailableError as exc:
            log.error("bloc_create_failed", error=str(exc))
            raise

        log.info("bloc_created")
        return bloc

    async def join_bloc(
        self,
        committee: CommitteeId,
        name: str,
        password: str,
        user_id: UserId,
    ) -> Bloc:
        """Add ``user_id`` to a bloc after checking its password.

        Joining a bloc the user already belongs to succeeds without
        changing the member set.

        Returns:
            The bloc as read before the join.

        Raises:
            InvalidInputError: If the name is blank.
            InvalidCredentialsError: If the bloc is absent or the password
                does not match.
            StoreUnavailableError: If the read or write fails.
        """
        bloc_name = normalize_bloc_name(name)
        log = self._log_operation(
            "join_bloc",
            committee=committee.value,
            bloc=bloc_name,
            user_id=user_id,
        )
        try:
            bloc = await self._gateway.get_bloc(committee, bloc_name)
            if bloc is None or not bloc.accepts_password(password):
                log.info("bloc_join_rejected")
                raise InvalidCredentialsError("Invalid bloc name or password")
            await self._gateway.add_bloc_member(committee, bloc_name, user_id)
        except DocumentNotFoundError as exc:
            log.info("bloc_join_rejected", reason="bloc_deleted")
            raise InvalidCredentialsError("Invalid bloc name or password") from exc
        except StoreUnavailableError as exc:
            log.error("bloc_join_failed", error=str(exc))
            raise

        log.info("bloc_joined", already_member=bloc.has_member(user_id))
        return bloc

    async def list_blocs(self, committee: CommitteeId) -> tuple[BlocSummary, ...]:
        """Bloc names and member counts, sorted by name."""
        return await self._gateway.list_blocs(committee)
