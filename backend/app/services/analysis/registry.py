"""
Scoring Variant Registry

Maps variant names to weight tables for the analysis and screening layer.
The scoring engine never reads it: the resolved table is passed to
`score()` explicitly.
"""

import logging
from typing import Iterable, Optional

from app.services.scoring.weights import BUILTIN_TABLES, WeightTable, read_tables_file

logger = logging.getLogger(__name__)


class WeightTableRegistry:
    """Named weight tables, seeded with the built-in variants."""

    def __init__(self, tables: Iterable[WeightTable] = BUILTIN_TABLES):
        self._tables: dict[str, WeightTable] = {}
        for table in tables:
            self.register(table)

    def register(self, table: WeightTable) -> None:
        """Register (or replace) a weight table by name."""
        self._tables[table.name] = table

    def get(self, name: str) -> WeightTable:
        """Look up a weight table. Raises KeyError for unknown variants."""
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(f"Unknown scoring variant: {name}") from None

    def list_tables(self) -> list[WeightTable]:
        return list(self._tables.values())

    def load_file(self, path: str) -> list[WeightTable]:
        """Load and register weight tables from a JSON list."""
        tables = read_tables_file(path)
        for table in tables:
            self.register(table)
            logger.info(f"Registered scoring table '{table.name}' from {path}")
        return tables


# Singleton instance
_registry: Optional[WeightTableRegistry] = None


def get_table_registry() -> WeightTableRegistry:
    """Get or create the application's variant registry."""
    global _registry
    if _registry is None:
        _registry = WeightTableRegistry()
    return _registry
