"""Bootstrap wiring for editor sessions.

The document store, clock and configuration are process-wide
singletons. Each call to create_editor_session() builds a fresh session
with its own subscriptions and view projector on top of them.
"""

from __future__ import annotations

from dotenv import load_dotenv

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.identity_provider import IdentityProviderProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.ports.view_listener import EditorViewListener
from src.application.services.bloc_registry_service import BlocRegistryService
from src.application.services.comment_service import CommentService
from src.application.services.document_gateway import DocumentGateway
from src.application.services.editing_lock_service import EditingLockService
from src.application.services.editor_session import EditorSession
from src.application.services.editor_view_projector import EditorViewProjector
from src.application.services.login_service import LoginService
from src.application.services.resolution_service import ResolutionService
from src.application.services.timer_service import TimerService
from src.bootstrap.logging import configure_logging, reset_logging
from src.config.editor_config import EditorConfig
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from src.infrastructure.stubs.anonymous_identity_provider_stub import (
    AnonymousIdentityProviderStub,
)
from src.infrastructure.stubs.in_memory_document_store import InMemoryDocumentStore

_config: EditorConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_document_store: DocumentStoreProtocol | None = None
_identity_provider: IdentityProviderProtocol | None = None


def get_editor_config() -> EditorConfig:
    """Get editor configuration (singleton), loading .env on first use."""
    global _config
    if _config is None:
        load_dotenv()
        _config = EditorConfig.from_environment()
    return _config


def get_time_authority() -> TimeAuthorityProtocol:
    """Get time authority instance (singleton)."""
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_document_store() -> DocumentStoreProtocol:
    """Get document store instance (singleton)."""
    global _document_store
    if _document_store is None:
        _document_store = InMemoryDocumentStore(
            time_authority=get_time_authority(),
            max_transaction_attempts=get_editor_config().max_transaction_attempts,
        )
    return _document_store


def get_identity_provider() -> IdentityProviderProtocol:
    """Get identity provider instance (singleton)."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = AnonymousIdentityProviderStub()
    return _identity_provider


def set_editor_dependencies(
    *,
    config: EditorConfig | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
    document_store: DocumentStoreProtocol | None = None,
    identity_provider: IdentityProviderProtocol | None = None,
) -> None:
    """Override singletons (for testing or alternative backends)."""
    global _config, _time_authority, _document_store, _identity_provider
    if config is not None:
        _config = config
    if time_authority is not None:
        _time_authority = time_authority
    if document_store is not None:
        _document_store = document_store
    if identity_provider is not None:
        _identity_provider = identity_provider


def reset_editor_dependencies() -> None:
    """Reset singletons (for testing)."""
    global _config, _time_authority, _document_store, _identity_provider
    _config = None
    _time_authority = None
    _document_store = None
    _identity_provider = None
    reset_logging()


def create_editor_session(
    listener: EditorViewListener | None = None,
    *,
    identity_provider: IdentityProviderProtocol | None = None,
) -> EditorSession:
    """Build an editor session wired to the process-wide dependencies.

    Args:
        listener: Optional view listener registered on the new session.
        identity_provider: Identity for this session (defaults to the
            process-wide provider).

    Returns:
        A logged-out EditorSession.
    """
    config = get_editor_config()
    configure_logging(config.environment)

    time_authority = get_time_authority()
    gateway = DocumentGateway(get_document_store())
    session = EditorSession(
        gateway=gateway,
        login=LoginService(
            identity=identity_provider or get_identity_provider(),
            committee_passphrases=config.committee_passphrases,
            chair_passphrase=config.chair_passphrase,
        ),
        registry=BlocRegistryService(gateway),
        resolutions=ResolutionService(gateway),
        locks=EditingLockService(gateway),
        timers=TimerService(gateway, time_authority),
        comments=CommentService(gateway),
        projector=EditorViewProjector(time_authority),
        poll_interval_seconds=config.timer_poll_interval_seconds,
    )
    if listener is not None:
        session.add_listener(listener)
    return session
