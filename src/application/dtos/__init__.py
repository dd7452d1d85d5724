"""Data transfer objects for the application layer."""

from src.application.dtos.editor_view import EditorViewState, Notice, NoticeKind

__all__: list[str] = ["EditorViewState", "Notice", "NoticeKind"]
