"""
Plain-text edits applied by the ``update`` command.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TransformResult:
    """Edited content plus a human-readable line per edit attempted."""
    content: str
    changes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return bool(self.changes)


def apply_transforms(
    content: str,
    find: Optional[str] = None,
    replace: Optional[str] = None,
    append: Optional[str] = None,
    prepend: Optional[str] = None
) -> TransformResult:
    """
    Apply find/replace, then append, then prepend.

    Find/replace is literal and replaces every non-overlapping occurrence;
    it runs only when ``find`` is non-empty and ``replace`` is given. A
    missing target is reported as a warning, not an error. Empty
    ``append``/``prepend`` strings are ignored.

    >>> apply_transforms("hi", find="h", replace="H", append="!", prepend=">> ").content
    '>> Hi!'
    """
    result = TransformResult(content=content)

    if find and replace is not None:
        if find not in result.content:
            result.warnings.append(f'Text "{find}" not found in file')
        elif find != replace:
            result.content = result.content.replace(find, replace)
            result.changes.append(f'Replaced "{find}" with "{replace}"')

    if append:
        result.content = result.content + append
        result.changes.append("Appended content")

    if prepend:
        result.content = prepend + result.content
        result.changes.append("Prepended content")

    return result
