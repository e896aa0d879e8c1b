"""
Output serializer.

Rebuilds the file from the spans the edit plan keeps. Retained text is copied
from the ORIGINAL spelling, so Unicode escapes outside deleted spans survive
untouched; an escape is dropped only as a whole, when the character it spells
lies inside a deleted span.
"""

from typing import List

from ..lexing.escapes import TranslatedText
from ..models.edit_plan import EditPlan


def serialize(translated: TranslatedText, plan: EditPlan) -> str:
    """
    Emit the original text minus the planned deletions.

    Args:
        translated: Translated view of the source, with its offset table
        plan: Deletions in translated coordinates

    Returns:
        Output text; identical to the original when the plan is empty
    """
    raw = translated.raw
    if plan.is_empty:
        return raw

    parts: List[str] = []
    position = 0
    for deletion in plan:
        start = translated.raw_offset(deletion.start)
        end = translated.raw_offset(deletion.end)
        parts.append(raw[position:start])
        position = end
    parts.append(raw[position:])
    return "".join(parts)


def render_translated(text: str, plan: EditPlan) -> str:
    """
    Apply an edit plan to the translated text itself.

    This is the escape-normalized view of the output: every Unicode escape
    appears as the character it denotes.
    """
    parts: List[str] = []
    position = 0
    for deletion in plan:
        parts.append(text[position : deletion.start])
        position = deletion.end
    parts.append(text[position:])
    return "".join(parts)
