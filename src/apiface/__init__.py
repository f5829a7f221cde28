"""apiface -- Partition API operations into named client interfaces.

This package takes a normalized set of API operations (method, path,
parameters, tags, deprecation flag) and a declarative settings document, and
decides which client interfaces a code generator should emit, which methods
each interface holds, what everything is called, and in which order
parameters appear. A separate renderer turns those decisions into source
code; apiface itself performs no HTTP and writes no generated code.

Typical workflow::

    from apiface import generate
    from apiface.config import resolve_settings
    from apiface.loader import load_operations

    op_set = load_operations("operations.yaml")
    result = generate(op_set.operations, resolve_settings(), api_title=op_set.title)

Modules:
    engine: Runs one generation pass end to end.
    models: Pydantic models shared across the entire package.
    policy: Settings validation into an immutable policy.
    generator: Filtering, naming, partitioning, and wiring plans.
    config: Settings file discovery, loading, and precedence.
    loader: Reading normalized operation sets from JSON/YAML.
    exceptions: Exception hierarchy.
"""

from apiface.engine import generate

__version__ = "0.1.0"

__all__ = ["generate", "__version__"]
