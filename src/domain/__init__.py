"""
Domain layer - Pure business logic for Resolution Desk.

This layer contains:
- Domain models (Committee, Bloc, Resolution, TimerState, Comment, SessionContext)
- Pure domain services (text rendering, countdown arithmetic, edit permission)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import ResolutionDeskError

__all__: list[str] = ["ResolutionDeskError"]
