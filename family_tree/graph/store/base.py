"""Query execution interface the repositories run against."""

from typing import Any, Protocol

Record = dict[str, Any]


class QueryExecutor(Protocol):
    """
    Executes a query template with named parameters.

    Each record maps a declared output name to a scalar, a list,
    or a node-like value exposing its properties.
    Implementations raise StoreError on any store failure.
    """

    async def execute(self, template: str, parameters: dict) -> list[Record]:
        """Run a read query."""
        ...

    async def execute_write(self, template: str, parameters: dict) -> list[Record]:
        """Run a query inside a single write transaction."""
        ...

    async def init_schema(self) -> bool:
        """Apply uniqueness constraints; False when they could not be applied."""
        ...

    async def verify(self) -> bool:
        """Check the store answers."""
        ...

    async def close(self) -> None:
        ...
