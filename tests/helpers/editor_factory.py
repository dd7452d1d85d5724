"""Type of the ``editor_factory`` fixture.

Long poll interval so the background ticker never fires during a test;
tests drive ticks explicitly with ``ticker.run_once()``.
"""

from __future__ import annotations

from collections.abc import Callable

from src.application.services.editor_session import EditorSession

TEST_POLL_INTERVAL_SECONDS = 60.0

EditorFactory = Callable[..., EditorSession]
