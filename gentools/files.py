"""File naming: turn a suggested name into a free path and save text there."""

import os
import re
from pathlib import Path
from typing import Callable

from gentools.errors import EmptyResultError

_STRIP_CHARS = re.compile(r'[\s"\'`]+')
_SEPARATORS = re.compile(r'[/\\]+')

# Give up after this many names lost to other writers between the existence check and create
MAX_CREATE_ATTEMPTS = 100


def sanitize_base_name(suggestion: str) -> str:
    """Strip whitespace and quotes from a model suggestion.

    Path separators become '-' so the file always lands in the target directory.
    """
    base = _STRIP_CHARS.sub('', suggestion)
    base = _SEPARATORS.sub('-', base).strip('-.')
    if not base:
        raise EmptyResultError(f"Unusable file name suggestion: {suggestion!r}")
    return base


def next_available_name(base: str, extension: str, exists: Callable[[str], bool]) -> str:
    """Return the first of base.ext, base-1.ext, base-2.ext, ... that does not exist."""
    candidate = f"{base}{extension}"
    n = 1
    while exists(candidate):
        candidate = f"{base}-{n}{extension}"
        n += 1
    return candidate


def save_text(text: str, base: str, directory: str | os.PathLike = ".", extension: str = ".txt") -> Path:
    """Write text to a new file named after base, never overwriting.

    Returns:
        Path of the file that was created
    """
    directory = Path(directory)

    def exists(name: str) -> bool:
        return (directory / name).exists()

    for _ in range(MAX_CREATE_ATTEMPTS):
        path = directory / next_available_name(base, extension, exists)
        try:
            # 'x' fails if a concurrent invocation created the same name first
            with open(path, 'x', encoding='utf-8', newline='') as f:
                f.write(text)
            return path
        except FileExistsError:
            continue

    raise FileExistsError(f"Could not find a free name for {base}{extension} in {directory}")
