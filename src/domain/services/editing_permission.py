"""Editing lock gate.

Permission is always re-derived from the latest committee lock flag;
it is never cached separately from that flag.
"""

from __future__ import annotations

from src.domain.models.session import Role


def can_edit(role: Role, is_editing_locked: bool) -> bool:
    """Return whether ``role`` may change resolution content.

    Chairs can always edit; delegates only while the committee is unlocked.
    """
    return role is not Role.DELEGATE or not is_editing_locked
