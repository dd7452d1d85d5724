"""
Pytest configuration and shared fixtures for Resolution Desk tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Time is always controlled through FakeTimeAuthority
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from src.application.services import (
    BlocRegistryService,
    CommentService,
    DocumentGateway,
    EditingLockService,
    EditorSession,
    EditorViewProjector,
    LoginService,
    ResolutionService,
    TimerService,
)
from src.config.editor_config import DEFAULT_CHAIR_PASSPHRASE, DEFAULT_COMMITTEE_PASSPHRASES
from src.infrastructure.stubs import AnonymousIdentityProviderStub, InMemoryDocumentStore
from tests.helpers import TEST_POLL_INTERVAL_SECONDS, EditorFactory, FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def fake_time() -> FakeTimeAuthority:
    """Frozen clock at 2026-03-01T09:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def store(fake_time: FakeTimeAuthority) -> InMemoryDocumentStore:
    """Empty in-memory document store on the fake clock."""
    return InMemoryDocumentStore(time_authority=fake_time)


@pytest.fixture
def gateway(store: InMemoryDocumentStore) -> DocumentGateway:
    """Typed gateway over the in-memory store."""
    return DocumentGateway(store)


@pytest.fixture
def identity() -> AnonymousIdentityProviderStub:
    """Signed-out anonymous identity provider."""
    return AnonymousIdentityProviderStub()


@pytest.fixture
def login_service(identity: AnonymousIdentityProviderStub) -> LoginService:
    """Login service with the default passphrases."""
    return LoginService(
        identity=identity,
        committee_passphrases=DEFAULT_COMMITTEE_PASSPHRASES,
        chair_passphrase=DEFAULT_CHAIR_PASSPHRASE,
    )


@pytest_asyncio.fixture
async def editor_factory(
    gateway: DocumentGateway,
    fake_time: FakeTimeAuthority,
) -> AsyncGenerator[EditorFactory, None]:
    """Build editor sessions sharing one store, each with its own identity.

    Every session built here is logged out at teardown so no ticker
    task outlives the test.

    Example:
        chair = editor_factory("chair-1")
        delegate = editor_factory("delegate-1")
    """
    sessions: list[EditorSession] = []

    def _build(user_id: str | None = None) -> EditorSession:
        session = EditorSession(
            gateway=gateway,
            login=LoginService(
                identity=AnonymousIdentityProviderStub(fixed_user_id=user_id),
                committee_passphrases=DEFAULT_COMMITTEE_PASSPHRASES,
                chair_passphrase=DEFAULT_CHAIR_PASSPHRASE,
            ),
            registry=BlocRegistryService(gateway),
            resolutions=ResolutionService(gateway),
            locks=EditingLockService(gateway),
            timers=TimerService(gateway, fake_time),
            comments=CommentService(gateway),
            projector=EditorViewProjector(fake_time),
            poll_interval_seconds=TEST_POLL_INTERVAL_SECONDS,
        )
        sessions.append(session)
        return session

    yield _build

    for session in sessions:
        await session.logout()
