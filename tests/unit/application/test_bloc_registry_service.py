"""Unit tests for BlocRegistryService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.services.bloc_registry_service import BlocRegistryService
from src.application.services.document_gateway import DocumentGateway, bloc_path
from src.domain.errors.bloc import NameTakenError
from src.domain.errors.session import InvalidCredentialsError
from src.domain.errors.store import DocumentNotFoundError, StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.bloc import Bloc, BlocSummary
from src.domain.models.committee import CommitteeId
from src.domain.models.session import UserId
from src.infrastructure.stubs import FailureMode, InMemoryDocumentStore

UNEP = CommitteeId.UNEP


@pytest.fixture
def registry(gateway: DocumentGateway) -> BlocRegistryService:
    return BlocRegistryService(gateway)


class TestCreateBloc:
    """Tests for bloc creation."""

    @pytest.mark.asyncio
    async def test_creates_empty_bloc(
        self, registry: BlocRegistryService, store: InMemoryDocumentStore
    ) -> None:
        bloc = await registry.create_bloc(UNEP, " Alpha ", "pw1")

        assert bloc == Bloc.create("Alpha", "pw1")
        assert store.document(bloc_path(UNEP, "Alpha")) == bloc.to_document()

    @pytest.mark.asyncio
    async def test_duplicate_name_leaves_original(
        self, registry: BlocRegistryService, store: InMemoryDocumentStore
    ) -> None:
        await registry.create_bloc(UNEP, "Alpha", "pw1")

        with pytest.raises(NameTakenError) as exc_info:
            await registry.create_bloc(UNEP, "Alpha", "pw2")

        assert exc_info.value.name == "Alpha"
        assert store.document(bloc_path(UNEP, "Alpha"))["password"] == "pw1"  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_same_name_in_other_committee(self, registry: BlocRegistryService) -> None:
        await registry.create_bloc(UNEP, "Alpha", "pw1")
        await registry.create_bloc(CommitteeId.WHO, "Alpha", "pw2")

    @pytest.mark.asyncio
    async def test_blank_name(self, registry: BlocRegistryService) -> None:
        with pytest.raises(InvalidInputError):
            await registry.create_bloc(UNEP, "  ", "pw1")

    @pytest.mark.asyncio
    async def test_blank_password(self, registry: BlocRegistryService) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            await registry.create_bloc(UNEP, "Alpha", "")
        assert exc_info.value.field == "bloc_password"

    @pytest.mark.asyncio
    async def test_store_failure(
        self, registry: BlocRegistryService, store: InMemoryDocumentStore
    ) -> None:
        store.set_failure_mode(FailureMode(writes_fail=True))
        with pytest.raises(StoreUnavailableError):
            await registry.create_bloc(UNEP, "Alpha", "pw1")


class TestJoinBloc:
    """Tests for joining blocs."""

    @pytest.mark.asyncio
    async def test_join_adds_member(self, registry: BlocRegistryService) -> None:
        await registry.create_bloc(UNEP, "Alpha", "pw1")

        await registry.join_bloc(UNEP, "Alpha", "pw1", UserId("u1"))

        assert await registry.list_blocs(UNEP) == (BlocSummary("Alpha", 1),)

    @pytest.mark.asyncio
    async def test_double_join_lists_member_once(
        self, registry: BlocRegistryService, gateway: DocumentGateway
    ) -> None:
        await registry.create_bloc(UNEP, "Alpha", "pw1")

        await registry.join_bloc(UNEP, "Alpha", "pw1", UserId("u1"))
        await registry.join_bloc(UNEP, "Alpha", "pw1", UserId("u1"))

        bloc = await gateway.get_bloc(UNEP, "Alpha")
        assert bloc is not None
        assert bloc.members == ("u1",)

    @pytest.mark.asyncio
    async def test_wrong_password(self, registry: BlocRegistryService) -> None:
        await registry.create_bloc(UNEP, "Alpha", "pw1")
        with pytest.raises(InvalidCredentialsError, match="Invalid bloc name or password"):
            await registry.join_bloc(UNEP, "Alpha", "nope", UserId("u1"))

    @pytest.mark.asyncio
    async def test_missing_bloc_looks_like_wrong_password(
        self, registry: BlocRegistryService
    ) -> None:
        with pytest.raises(InvalidCredentialsError, match="Invalid bloc name or password"):
            await registry.join_bloc(UNEP, "Ghost", "pw1", UserId("u1"))

    @pytest.mark.asyncio
    async def test_deleted_between_read_and_write(self) -> None:
        gateway = MagicMock(spec=DocumentGateway)
        gateway.get_bloc = AsyncMock(return_value=Bloc.create("Alpha", "pw1"))
        gateway.add_bloc_member = AsyncMock(side_effect=DocumentNotFoundError("x"))

        with pytest.raises(InvalidCredentialsError):
            await BlocRegistryService(gateway).join_bloc(UNEP, "Alpha", "pw1", UserId("u1"))

    @pytest.mark.asyncio
    async def test_list_blocs_sorted(self, registry: BlocRegistryService) -> None:
        await registry.create_bloc(UNEP, "Zeta", "pw")
        await registry.create_bloc(UNEP, "Alpha", "pw")

        names = [summary.name for summary in await registry.list_blocs(UNEP)]

        assert names == ["Alpha", "Zeta"]
