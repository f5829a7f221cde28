"""Identifier normalisation shared by policy resolution and naming.

Raw names in an API description (operation ids, tags, path segments, API
titles) are free-form text. These helpers turn them into PascalCase
identifiers the renderer can emit verbatim.
"""

from __future__ import annotations

import re

_WORD_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_INVALID_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


def to_pascal_case(text: str) -> str:
    """Join the alphanumeric words of *text*, each with an upper-cased first letter.

    Existing inner capitals are kept, so camelCase input stays readable.

    Example::

        >>> to_pascal_case("getPetById")
        'GetPetById'
        >>> to_pascal_case("pet store")
        'PetStore'
        >>> to_pascal_case("list-user_accounts")
        'ListUserAccounts'
    """
    words = [w for w in _WORD_SPLIT_RE.split(text) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def sanitize_identifier(name: str) -> str:
    """Strip characters that cannot appear in an identifier.

    A leading digit gets an underscore prefix. The result may be empty; the
    caller decides on a fallback.
    """
    result = _INVALID_IDENT_RE.sub("", name)
    if result and result[0].isdigit():
        result = f"_{result}"
    return result
