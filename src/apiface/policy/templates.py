"""Compile and expand operation-name templates.

An operation-name template is a literal string with ``{placeholder}``
markers, e.g. ``"{operationId}Async"`` or ``"{httpMethod}{lastPathSegment}"``.
Templates are compiled once, at policy-resolution time, into a
:class:`~apiface.models.NameTemplate` so that unknown or malformed
placeholders fail before any operation is processed.

Recognised placeholders:

* ``{operationId}`` (also ``{operationName}``) -- the operation id.
* ``{httpMethod}`` -- the HTTP method (``get``, ``post``, ...).
* ``{lastPathSegment}`` -- the last path segment, braces removed.
* ``{tag}`` -- the interface's tag under ``ByTag``, otherwise the primary tag.

Expansion is pure string substitution; identifier casing is applied by
:func:`~apiface.generator.naming.resolve_method_name`.
"""

from __future__ import annotations

import re

from apiface.exceptions import PolicyError, PolicyErrorKind
from apiface.models import NameTemplate, Placeholder, TemplatePart

_PLACEHOLDER_NAMES: dict[str, Placeholder] = {
    "operationId": Placeholder.OPERATION_ID,
    "operationName": Placeholder.OPERATION_ID,
    "httpMethod": Placeholder.HTTP_METHOD,
    "lastPathSegment": Placeholder.LAST_PATH_SEGMENT,
    "tag": Placeholder.TAG,
}

# Placeholders whose value is never empty for a valid operation.
_NEVER_EMPTY = frozenset({Placeholder.OPERATION_ID, Placeholder.HTTP_METHOD})

_TOKEN_RE = re.compile(r"\{([^{}]*)\}")
_IDENT_CHAR_RE = re.compile(r"[A-Za-z0-9_]")


def compile_template(source: str) -> NameTemplate:
    """Parse *source* into a :class:`~apiface.models.NameTemplate`.

    Args:
        source: The raw template string from the settings.

    Returns:
        The compiled template. Adjacent literal text is kept as a single
        part; each placeholder is its own part.

    Raises:
        PolicyError: With kind ``UnknownPlaceholder`` if the template names a
            placeholder outside the recognised set or has unbalanced braces.

    Example::

        >>> compile_template("{operationId}Async").placeholders
        (<Placeholder.OPERATION_ID: 'operationId'>,)
    """
    parts: list[TemplatePart] = []
    pos = 0
    for match in _TOKEN_RE.finditer(source):
        _append_literal(parts, source[pos : match.start()], source)
        name = match.group(1).strip()
        placeholder = _PLACEHOLDER_NAMES.get(name)
        if placeholder is None:
            known = ", ".join("{" + key + "}" for key in _PLACEHOLDER_NAMES)
            raise PolicyError(
                f"Unknown placeholder '{{{name}}}' in operation name template "
                f"'{source}' (known: {known})",
                PolicyErrorKind.UNKNOWN_PLACEHOLDER,
            )
        parts.append(TemplatePart(placeholder=placeholder))
        pos = match.end()
    _append_literal(parts, source[pos:], source)
    return NameTemplate(source=source, parts=tuple(parts))


def _append_literal(parts: list[TemplatePart], text: str, source: str) -> None:
    if not text:
        return
    if "{" in text or "}" in text:
        raise PolicyError(
            f"Unbalanced brace in operation name template '{source}'",
            PolicyErrorKind.UNKNOWN_PLACEHOLDER,
        )
    parts.append(TemplatePart(literal=text))


def always_yields_name(template: NameTemplate) -> bool:
    """Return ``True`` if *template* can never expand to an empty identifier.

    That holds when the literal text contains at least one identifier
    character, or when the template uses a placeholder that always has a
    value (``{operationId}``, ``{httpMethod}``). ``{tag}`` and
    ``{lastPathSegment}`` alone are not enough: untagged operations and the
    root path expand them to nothing.
    """
    for part in template.parts:
        if part.placeholder in _NEVER_EMPTY:
            return True
        if part.placeholder is None and _IDENT_CHAR_RE.search(part.literal):
            return True
    return False


def expand_template(template: NameTemplate, values: dict[Placeholder, str]) -> str:
    """Substitute *values* into *template*.

    Missing values expand to the empty string.
    """
    return "".join(
        part.literal if part.placeholder is None else values.get(part.placeholder, "")
        for part in template.parts
    )
