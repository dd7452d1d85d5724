"""Integration test configuration.

Integration tests drive several EditorSession instances against one
shared InMemoryDocumentStore, the way several browsers share one
committee. The shared fixtures come from tests/conftest.py; this module
only marks every test in the directory.

Usage:
    @pytest.mark.asyncio
    async def test_example(editor_factory: EditorFactory) -> None:
        chair = editor_factory("chair-1")
        delegate = editor_factory("delegate-1")
        ...
"""

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Apply the integration marker to every test collected here."""
    for item in items:
        if "tests/integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
