"""Utility helpers shared across :mod:`pdf_handouts`."""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, Path]

_GLOB_CHARS = frozenset("*?[")


def get_logger(name: str = "pdf_handouts") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def ensure_path(path: PathLike) -> Path:
    """Return an absolute :class:`~pathlib.Path` for *path* with ``~`` expanded."""

    return Path(path).expanduser().resolve(strict=False)


def ensure_iterable(paths: Iterable[PathLike]) -> list[Path]:
    """Validate and convert an iterable of paths to :class:`Path` objects."""

    return [ensure_path(path) for path in paths]


def expand_inputs(patterns: Iterable[str]) -> list[Path]:
    """Expand glob patterns in *patterns* and return the sorted file list.

    Literal paths are kept as given. A pattern that matches nothing raises
    :class:`FileNotFoundError` so typos do not silently shrink a handout.
    """

    paths: list[Path] = []
    for pattern in patterns:
        if _GLOB_CHARS.intersection(pattern):
            matches = glob.glob(pattern)
            if not matches:
                raise FileNotFoundError(f"No files matched pattern: {pattern}")
            paths.extend(Path(match) for match in matches)
        else:
            paths.append(Path(pattern))
    return sorted(paths)


def format_number(value: float) -> str:
    """Format *value* for a content stream: at most four decimals, no trailing zeros."""

    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


__all__ = [
    "PathLike",
    "get_logger",
    "ensure_path",
    "ensure_iterable",
    "expand_inputs",
    "format_number",
]
