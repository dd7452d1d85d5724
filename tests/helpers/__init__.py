"""Test helpers for Resolution Desk tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    RecordingListener: View listener that records renders and notices
    EditorFactory: Type of the editor_factory fixture

Usage:
    from tests.helpers import FakeTimeAuthority, RecordingListener
"""

from tests.helpers.editor_factory import TEST_POLL_INTERVAL_SECONDS, EditorFactory
from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.recording_listener import RecordingListener

__all__ = [
    "TEST_POLL_INTERVAL_SECONDS",
    "EditorFactory",
    "FakeTimeAuthority",
    "RecordingListener",
]
