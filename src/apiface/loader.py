"""Load a normalized operation set from a file or stdin.

The external API description parser hands the engine a list of operations. When that
list is exchanged as a file, it is either a bare list of operation objects
or a mapping with an optional ``title`` and an ``operations`` list::

    title: Swagger Petstore
    operations:
      - id: listPets
        method: get
        path: /pets
        tags: [pets]
        parameters:
          - {name: limit, in: query, required: false}

JSON and YAML are both accepted; the format is detected from the file
extension, falling back to content sniffing.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from apiface.documents import parse_content, read_document
from apiface.exceptions import OperationLoadError
from apiface.models import OperationSet

logger = logging.getLogger(__name__)


def load_operations(source: str | Path) -> OperationSet:
    """Load an operation set from a file path, or ``"-"`` for stdin.

    Args:
        source: Path to a JSON/YAML file, or ``"-"``.

    Returns:
        The validated :class:`~apiface.models.OperationSet`.

    Raises:
        OperationLoadError: If the source cannot be read, parsed, or
            validated (including duplicate parameter names).
    """
    if str(source) == "-":
        document = _read_stdin()
        origin = "stdin"
    else:
        path = Path(source)
        document = read_document(path, OperationLoadError)
        origin = str(path)

    op_set = parse_operation_set(document)
    logger.debug("Loaded %d operation(s) from %s", len(op_set.operations), origin)
    return op_set


def parse_operation_set(document: Any) -> OperationSet:
    """Validate an already-parsed document into an :class:`~apiface.models.OperationSet`.

    Raises:
        OperationLoadError: If the document has the wrong shape or an
            operation fails validation.
    """
    if isinstance(document, list):
        document = {"operations": document}
    if not isinstance(document, dict):
        kind = type(document).__name__ if document is not None else "empty document"
        raise OperationLoadError(
            f"Operation set must be a list or an object (got {kind})"
        )
    try:
        return OperationSet.model_validate(document)
    except ValidationError as exc:
        raise OperationLoadError(f"Invalid operation set: {exc}") from exc


def _read_stdin() -> Any:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise OperationLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise OperationLoadError("No input received from stdin")

    return parse_content(content, OperationLoadError)
