"""Unit tests for ResolutionService."""

import asyncio

import pytest
import pytest_asyncio

from src.application.services.document_gateway import DocumentGateway, bloc_path
from src.application.services.resolution_service import MutationOutcome, ResolutionService
from src.domain.errors.session import NoActiveBlocError
from src.domain.errors.store import StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.bloc import Bloc
from src.domain.models.committee import CommitteeId
from src.domain.models.resolution import ClauseKind, ResolutionHeader
from src.domain.models.session import Role, SessionContext, UserId
from src.infrastructure.stubs import FailureMode, InMemoryDocumentStore

UNEP = CommitteeId.UNEP
ALPHA = bloc_path(UNEP, "Alpha")

DELEGATE = SessionContext(UserId("delegate-1"), Role.DELEGATE, UNEP, bloc="Alpha")
CHAIR = SessionContext(UserId("chair-1"), Role.CHAIR, UNEP, selected_bloc="Alpha")


@pytest_asyncio.fixture
async def service(gateway: DocumentGateway) -> ResolutionService:
    """Resolution service over a committee with one bloc, Alpha."""
    await gateway.ensure_committee(UNEP)
    await gateway.create_bloc(UNEP, Bloc.create("Alpha", "pw1"))
    return ResolutionService(gateway)


async def _lock(store: InMemoryDocumentStore) -> None:
    await store.set("committees/unep", {"isEditingLocked": True}, merge=True)


class TestInsertClause:
    """Tests for clause insertion."""

    @pytest.mark.asyncio
    async def test_operative_numbering(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        first = await service.insert_clause(DELEGATE, "Urges", ClauseKind.OPERATIVE)
        second = await service.insert_clause(DELEGATE, "Calls upon", ClauseKind.OPERATIVE)

        assert first.stored_text == "1. _Urges_"
        assert second.stored_text == "2. _Calls upon_"
        assert second.position == 2
        assert store.document(ALPHA)["resolution"]["operativeClauses"] == [  # type: ignore[index]
            "1. _Urges_",
            "2. _Calls upon_",
        ]

    @pytest.mark.asyncio
    async def test_preambulatory(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        result = await service.insert_clause(DELEGATE, "Recalling", ClauseKind.PREAMBULATORY)

        assert result.applied
        assert result.stored_text == "*Recalling*"
        assert store.document(ALPHA)["resolution"]["operativeClauses"] == []  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_locked_delegate_rejected_without_write(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        await _lock(store)
        before = store.document(ALPHA)

        result = await service.insert_clause(DELEGATE, "Urges", ClauseKind.OPERATIVE)

        assert result.outcome is MutationOutcome.EDITING_LOCKED
        assert result.stored_text is None
        assert store.document(ALPHA) == before

    @pytest.mark.asyncio
    async def test_chair_writes_while_locked(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        await _lock(store)
        result = await service.insert_clause(CHAIR, "Urges", ClauseKind.OPERATIVE)
        assert result.applied

    @pytest.mark.asyncio
    async def test_blank_clause(self, service: ResolutionService) -> None:
        with pytest.raises(InvalidInputError):
            await service.insert_clause(DELEGATE, "  ", ClauseKind.OPERATIVE)

    @pytest.mark.asyncio
    async def test_no_active_bloc(self, service: ResolutionService) -> None:
        chair = SessionContext(UserId("chair-1"), Role.CHAIR, UNEP)
        with pytest.raises(NoActiveBlocError):
            await service.insert_clause(chair, "Urges", ClauseKind.OPERATIVE)

    @pytest.mark.asyncio
    async def test_deleted_bloc(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        await store.delete(ALPHA)
        with pytest.raises(NoActiveBlocError):
            await service.insert_clause(DELEGATE, "Urges", ClauseKind.OPERATIVE)

    @pytest.mark.asyncio
    async def test_store_failure_propagates(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        store.set_failure_mode(FailureMode(writes_fail=True))
        with pytest.raises(StoreUnavailableError):
            await service.insert_clause(DELEGATE, "Urges", ClauseKind.OPERATIVE)

    @pytest.mark.asyncio
    async def test_concurrent_inserts_are_gap_free(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        """Racing inserters never get the same number."""
        results = await asyncio.gather(
            *(
                service.insert_clause(DELEGATE, f"Clause {i}", ClauseKind.OPERATIVE)
                for i in range(5)
            )
        )

        positions = sorted(result.position for result in results)  # type: ignore[type-var]
        assert positions == [1, 2, 3, 4, 5]
        stored = store.document(ALPHA)["resolution"]["operativeClauses"]  # type: ignore[index]
        assert [clause.split(".")[0] for clause in stored] == ["1", "2", "3", "4", "5"]


class TestSaveHeaderFields:
    """Tests for header saves."""

    HEADER = ResolutionHeader(
        forum="GA",
        question_of="Plastics",
        submitted_by="France",
        co_submitted_by="Chile",
    )

    @pytest.mark.asyncio
    async def test_applied(self, service: ResolutionService, store: InMemoryDocumentStore) -> None:
        outcome = await service.save_header_fields(DELEGATE, self.HEADER)

        assert outcome is MutationOutcome.APPLIED
        resolution = store.document(ALPHA)["resolution"]  # type: ignore[index]
        assert resolution["forum"] == "GA"
        assert resolution["coSubmittedBy"] == "Chile"

    @pytest.mark.asyncio
    async def test_locked_delegate_skipped_silently(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        """Header saves run per keystroke, so a lock rejection does not raise."""
        await _lock(store)
        before = store.document(ALPHA)

        outcome = await service.save_header_fields(DELEGATE, self.HEADER)

        assert outcome is MutationOutcome.EDITING_LOCKED
        assert store.document(ALPHA) == before

    @pytest.mark.asyncio
    async def test_deleted_bloc(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        await store.delete(ALPHA)
        with pytest.raises(NoActiveBlocError):
            await service.save_header_fields(DELEGATE, self.HEADER)

    @pytest.mark.asyncio
    async def test_read_failure_propagates(
        self, service: ResolutionService, store: InMemoryDocumentStore
    ) -> None:
        store.set_failure_mode(FailureMode(reads_fail=True))
        with pytest.raises(StoreUnavailableError):
            await service.save_header_fields(DELEGATE, self.HEADER)
