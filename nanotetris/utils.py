"""Path and file helpers and a matrix formatter."""

from __future__ import annotations

import os
from pathlib import Path

from nanotetris.transform import Transform2D


def path_to_str(path: str | os.PathLike[str]) -> str:
    """Return the absolute, normalised form of ``path``; it need not exist."""
    return str(Path(path).resolve(strict=False))


def read_file(path: str | os.PathLike[str]) -> str:
    """Return the whole text of the file at ``path``."""
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def format_transform(transform: Transform2D) -> str:
    """Render a transform as three lines of ``[v][v][v]``."""
    values = iter(transform)
    return "".join(
        f"[{a:f}][{b:f}][{c:f}]\n" for a, b, c in zip(values, values, values)
    )