from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Sequence


class TableStore(ABC):
    """Row-level access to named tables.

    Rows are addressed by 1-based data-row position (the header row is not
    counted). Positions shift after a delete, so callers re-read before
    addressing a row again.
    """

    @abstractmethod
    async def read_all(self, table: str) -> list[list[str]]:
        """Every data row, header excluded. An empty table gives []."""
        raise NotImplementedError

    @abstractmethod
    async def append(self, table: str, rows: Sequence[Sequence[str]]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_row(self, table: str, row_index: int, cells: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_row(self, table: str, row_index: int) -> None:
        raise NotImplementedError

    # Schema-level operations (reconciler only)
    @abstractmethod
    async def list_tables(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    async def create_tables(self, tables: dict[str, list[str]]) -> None:
        """Add each missing tab and write its header row. Empty header lists get no header row."""
        raise NotImplementedError

    @abstractmethod
    async def write_documentation(self, table: str, rows: list[tuple[str, list[str]]]) -> None:
        """Blank the tab and write (style, cells) rows from the top."""
        raise NotImplementedError
