"""Unit tests for CommentService."""

import pytest
import pytest_asyncio

from src.application.services.comment_service import CommentService
from src.application.services.document_gateway import DocumentGateway, comment_path
from src.domain.errors.session import NoActiveBlocError, RoleNotPermittedError
from src.domain.errors.store import StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.bloc import Bloc
from src.domain.models.committee import CommitteeId
from src.domain.models.session import Role, SessionContext, UserId
from src.infrastructure.stubs import FailureMode, InMemoryDocumentStore
from tests.helpers import FakeTimeAuthority

UNEP = CommitteeId.UNEP
CHAIR = SessionContext(UserId("chair-1"), Role.CHAIR, UNEP, selected_bloc="Alpha")


@pytest_asyncio.fixture
async def comments(gateway: DocumentGateway) -> CommentService:
    await gateway.create_bloc(UNEP, Bloc.create("Alpha", "pw1"))
    return CommentService(gateway)


class TestAddComment:
    """Tests for chair comments."""

    @pytest.mark.asyncio
    async def test_stamped_with_server_time(
        self,
        comments: CommentService,
        store: InMemoryDocumentStore,
        fake_time: FakeTimeAuthority,
    ) -> None:
        comment_id = await comments.add_comment(CHAIR, "  Please cite sources  ")

        assert store.document(comment_path(UNEP, "Alpha", comment_id)) == {
            "text": "Please cite sources",
            "chair": "chair-1",
            "timestamp": fake_time.now(),
        }

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, comments: CommentService) -> None:
        first = await comments.add_comment(CHAIR, "one")
        second = await comments.add_comment(CHAIR, "two")
        assert first != second

    @pytest.mark.asyncio
    async def test_blank_rejected(self, comments: CommentService) -> None:
        with pytest.raises(InvalidInputError):
            await comments.add_comment(CHAIR, "   ")

    @pytest.mark.asyncio
    async def test_delegate_rejected(self, comments: CommentService) -> None:
        delegate = SessionContext(UserId("d-1"), Role.DELEGATE, UNEP, bloc="Alpha")
        with pytest.raises(RoleNotPermittedError):
            await comments.add_comment(delegate, "hi")

    @pytest.mark.asyncio
    async def test_requires_selected_bloc(self, comments: CommentService) -> None:
        chair = SessionContext(UserId("chair-1"), Role.CHAIR, UNEP)
        with pytest.raises(NoActiveBlocError):
            await comments.add_comment(chair, "hi")

    @pytest.mark.asyncio
    async def test_deleted_bloc(self, comments: CommentService, store: InMemoryDocumentStore) -> None:
        await store.delete("committees/unep/blocs/Alpha")
        with pytest.raises(NoActiveBlocError):
            await comments.add_comment(CHAIR, "hi")

    @pytest.mark.asyncio
    async def test_store_failure(
        self, comments: CommentService, store: InMemoryDocumentStore
    ) -> None:
        store.set_failure_mode(FailureMode(writes_fail=True))
        with pytest.raises(StoreUnavailableError):
            await comments.add_comment(CHAIR, "hi")
