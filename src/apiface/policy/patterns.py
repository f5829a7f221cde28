"""Glob path patterns for the include-path filter.

A pattern matches a whole operation path, anchored at the root. A leading
``/`` is optional on both sides, so ``pets/*`` and ``/pets/*`` are the same
pattern. Matching uses :mod:`wcmatch.glob` with ``GLOBSTAR``:

* ``*`` and ``?`` stay within one path segment: ``/pets/*`` matches
  ``/pets/{petId}`` but not ``/pets/{petId}/photos``.
* ``**`` spans any number of segments: ``/store/**`` matches everything
  below ``/store``, and ``/**/pets`` matches ``pets`` at any depth.
* A pattern never matches descendants implicitly: ``/pets`` matches only
  ``/pets``.
* Braces are literal, so ``/pets/{petId}`` names that exact template path.
"""

from __future__ import annotations

from typing import Sequence

from wcmatch import glob

from apiface.exceptions import PolicyError, PolicyErrorKind

_GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.FORCEUNIX


def _relative(patterns: Sequence[str]) -> list[str]:
    return [pattern.lstrip("/") for pattern in patterns]


def check_path_patterns(patterns: Sequence[str]) -> None:
    """Translate *patterns* once so malformed globs fail at policy time.

    Raises:
        PolicyError: With kind ``InvalidSetting`` for a malformed pattern.
    """
    try:
        glob.translate(_relative(patterns), flags=_GLOB_FLAGS)
    except ValueError as exc:
        raise PolicyError(
            f"Invalid include path pattern: {exc}", PolicyErrorKind.INVALID_SETTING
        ) from exc


def path_matches(path: str, patterns: Sequence[str]) -> bool:
    """Return ``True`` if *path* matches at least one of *patterns*."""
    return glob.globmatch(path.lstrip("/"), _relative(patterns), flags=_GLOB_FLAGS)
