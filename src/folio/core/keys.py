# ABOUTME: Catalog key derivation and natural sort ordering.
# ABOUTME: Turns work directory paths into stable, slash-separated catalog keys.

import re
from collections.abc import Callable
from pathlib import PurePath

# Sort key function type shared by directory, sidecar, and page ordering
SortKey = Callable[[str], tuple]

_DIGIT_RUN_RE = re.compile(r"(\d+)")
_SEPARATOR_RE = re.compile(r"[\\/]")


def derive_key(root: PurePath, directory: PurePath) -> str:
    """Derive the catalog key for a work directory.

    The key is the directory's path relative to the scan root, joined with
    forward slashes regardless of the host separator.

    Args:
        root: The scan root.
        directory: A directory beneath root.

    Returns:
        The relative path as a '/'-separated string, e.g. "a/b".

    Raises:
        ValueError: If directory is not beneath root.
    """
    relative = directory.relative_to(root)
    return "/".join(relative.parts)


def natural_key(name: str) -> tuple:
    """Numeric-aware, case-insensitive sort key ("page2" before "page10").

    Digit runs compare as integers and text runs compare casefolded. Each
    run is tagged so that text and numbers never compare against each other.
    The original string is the final tiebreaker, which keeps the order total
    for names that differ only in case or leading zeros.
    """
    parts: list[tuple[int, int | str]] = []
    for chunk in _DIGIT_RUN_RE.split(name.casefold()):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return (tuple(parts), name)


def normalize_key(raw: str) -> str:
    """Normalize a user-supplied key: trim, then replace '/' and '\\' with '-'."""
    return _SEPARATOR_RE.sub("-", raw.strip())
