"""Resolution text projection.

Both functions here are pure: they never mutate the resolution and
return identical output for identical input. The editor recomputes the
text from scratch on every bloc change notification.
"""

from __future__ import annotations

from src.domain.models.resolution import Resolution

EXPORT_RULE = "-" * 40


def render_resolution_text(resolution: Resolution) -> str:
    """Render the clause body of a resolution.

    Preambulatory clauses are joined by ``",\\n\\n"`` and followed by a
    trailing ``",\\n\\n"``. Operative clauses follow, joined by ``"\\n\\n"``;
    each ends with ``";"`` except the last, which ends with ``"."``.

    Args:
        resolution: The resolution to render.

    Returns:
        The rendered text (empty when both clause lists are empty).
    """
    text = ""
    if resolution.preambulatory_clauses:
        text += ",\n\n".join(resolution.preambulatory_clauses) + ",\n\n"
    operative = resolution.operative_clauses
    if operative:
        last = len(operative) - 1
        text += "\n\n".join(
            clause + ("." if index == last else ";") for index, clause in enumerate(operative)
        )
    return text


def render_export_document(bloc_name: str, resolution: Resolution) -> str:
    """Render a printable plain-text document for a bloc's resolution.

    Layout:
        Resolution - <bloc>
        RESOLUTION
        FORUM / QUESTION OF / SUBMITTED BY / CO-SUBMITTED BY lines
        a rule, then the rendered clause body

    Args:
        bloc_name: Name of the bloc owning the resolution.
        resolution: The resolution to export.

    Returns:
        The printable document as a single string ending in a newline.
    """
    lines = [
        f"Resolution - {bloc_name}",
        "",
        "RESOLUTION",
        "",
        f"FORUM: {resolution.forum}",
        f"QUESTION OF: {resolution.question_of}",
        f"SUBMITTED BY: {resolution.submitted_by}",
        f"CO-SUBMITTED BY: {resolution.co_submitted_by}",
        EXPORT_RULE,
        render_resolution_text(resolution),
    ]
    return "\n".join(lines) + "\n"
