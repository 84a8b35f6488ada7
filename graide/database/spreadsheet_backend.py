from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

from graide.database.google_api import GoogleApiClient


class SpreadsheetBackend(ABC):
    """The narrow slice of the Sheets API the persistence layer relies on."""

    @abstractmethod
    async def get(self, spreadsheet_id: str) -> dict:
        """Spreadsheet metadata: {"spreadsheetId", "sheets": [{"properties": {"title", "sheetId"}}]}"""
        raise NotImplementedError

    @abstractmethod
    async def create(self, title: str, sheet_titles: list[str]) -> dict:
        """Create a spreadsheet with the given tabs; returns the same shape as get()."""
        raise NotImplementedError

    @abstractmethod
    async def values_get(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        raise NotImplementedError

    @abstractmethod
    async def values_append(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def values_update(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def batch_update(self, spreadsheet_id: str, requests: list[dict]) -> dict:
        """Returns {"replies": [...]} with one reply per request."""
        raise NotImplementedError


class GoogleSheetsBackend(GoogleApiClient, SpreadsheetBackend):
    api_name = "Sheets API"

    def _values_url(self, spreadsheet_id: str, range_: str) -> str:
        return f"{self.base_url}/{spreadsheet_id}/values/{quote(range_, safe='')}"

    async def get(self, spreadsheet_id: str) -> dict:
        return await self._request(
            "GET",
            f"{self.base_url}/{spreadsheet_id}",
            params={"fields": "spreadsheetId,properties.title,sheets.properties(sheetId,title)"},
        )

    async def create(self, title: str, sheet_titles: list[str]) -> dict:
        body: dict[str, Any] = {
            "properties": {"title": title},
            "sheets": [{"properties": {"title": t}} for t in sheet_titles],
        }
        return await self._request("POST", self.base_url, json=body)

    async def values_get(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        data = await self._request("GET", self._values_url(spreadsheet_id, range_))
        return data.get("values", [])

    async def values_append(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        await self._request(
            "POST",
            f"{self._values_url(spreadsheet_id, range_)}:append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": rows},
        )

    async def values_update(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        await self._request(
            "PUT",
            self._values_url(spreadsheet_id, range_),
            params={"valueInputOption": "RAW"},
            json={"values": rows},
        )

    async def batch_update(self, spreadsheet_id: str, requests: list[dict]) -> dict:
        return await self._request(
            "POST",
            f"{self.base_url}/{spreadsheet_id}:batchUpdate",
            json={"requests": requests},
        )
