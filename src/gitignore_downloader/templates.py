"""Template model, name normalization and built-in flag snippets."""

from __future__ import annotations

from dataclasses import dataclass

FLAG_PREFIX = "--"

# Reserved names that resolve to local content instead of a network fetch
BUILT_IN_FLAGS: dict[str, str] = {
    "--macos": "# Desktop Service Store Mac\n.DS_Store\n",
    "--locks": "# Lock Files\npackage-lock.json\nyarn.lock\n",
}


@dataclass(frozen=True)
class Template:
    """A named block of ignore patterns ready to be written."""

    name: str
    """Normalized template name (e.g. 'Rust') or a built-in flag"""

    content: str
    """Raw template text, written verbatim"""


def normalize_type(name: str) -> str:
    """Capitalize the first character of a template name.

    Flags (``--`` prefix) pass through unchanged. Only the first character
    is touched, so ``visualStudio`` becomes ``VisualStudio``.
    """
    if name.startswith(FLAG_PREFIX):
        return name
    if not name:
        return name
    return name[0].upper() + name[1:]


def built_in_flag(name: str) -> str | None:
    """Return the canned snippet for a built-in flag, or None."""
    return BUILT_IN_FLAGS.get(name)


__all__ = ["BUILT_IN_FLAGS", "Template", "built_in_flag", "normalize_type"]
