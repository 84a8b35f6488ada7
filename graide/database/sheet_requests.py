"""batchUpdate request bodies for tab creation, header rows and the README tab."""
from __future__ import annotations
from typing import Sequence

HEADER_BACKGROUND = {"red": 0.9, "green": 0.9, "blue": 0.9}
CELL_FIELDS = "userEnteredValue,userEnteredFormat"


def add_sheet(title: str) -> dict:
    return {"addSheet": {"properties": {"title": title}}}


def header_row(sheet_id: int, headers: Sequence[str]) -> dict:
    return {
        "updateCells": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": 0,
                "endRowIndex": 1,
                "startColumnIndex": 0,
                "endColumnIndex": len(headers),
            },
            "rows": [
                {
                    "values": [
                        {
                            "userEnteredValue": {"stringValue": header},
                            "userEnteredFormat": {
                                "textFormat": {"bold": True},
                                "backgroundColor": HEADER_BACKGROUND,
                            },
                        }
                        for header in headers
                    ]
                }
            ],
            "fields": CELL_FIELDS,
        }
    }


def delete_row(sheet_id: int, sheet_row: int) -> dict:
    """sheet_row is the 1-based row number as shown in the Sheets UI."""
    return {
        "deleteDimension": {
            "range": {
                "sheetId": sheet_id,
                "dimension": "ROWS",
                "startIndex": sheet_row - 1,
                "endIndex": sheet_row,
            }
        }
    }


def clear_sheet(sheet_id: int) -> dict:
    # a range with only sheetId covers the whole tab; no rows means "blank it"
    return {"updateCells": {"range": {"sheetId": sheet_id}, "fields": CELL_FIELDS}}


def column_width(sheet_id: int, start: int, end: int, pixels: int) -> dict:
    return {
        "updateDimensionProperties": {
            "range": {"sheetId": sheet_id, "dimension": "COLUMNS", "startIndex": start, "endIndex": end},
            "properties": {"pixelSize": pixels},
            "fields": "pixelSize",
        }
    }


def styled_rows(sheet_id: int, rows: Sequence[tuple[str, Sequence[str]]], width: int) -> dict:
    """Write (style, cells) pairs from A1 down. style is one of title/section/columns/plain."""
    styles = {
        "title": ({"red": 0.2, "green": 0.4, "blue": 0.7}, True, 16, {"red": 1, "green": 1, "blue": 1}),
        "section": ({"red": 0.95, "green": 0.95, "blue": 0.95}, True, 14, {"red": 0, "green": 0, "blue": 0}),
        "columns": (HEADER_BACKGROUND, True, 10, {"red": 0, "green": 0, "blue": 0}),
        "plain": ({"red": 1, "green": 1, "blue": 1}, False, 10, {"red": 0, "green": 0, "blue": 0}),
    }
    out = []
    for style, cells in rows:
        background, bold, size, colour = styles[style]
        padded = list(cells) + [""] * (width - len(cells))
        out.append(
            {
                "values": [
                    {
                        "userEnteredValue": {"stringValue": cell},
                        "userEnteredFormat": {
                            "backgroundColor": background,
                            "textFormat": {"bold": bold, "fontSize": size, "foregroundColor": colour},
                            "wrapStrategy": "WRAP",
                        },
                    }
                    for cell in padded[:width]
                ]
            }
        )
    return {
        "updateCells": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": 0,
                "endRowIndex": len(out),
                "startColumnIndex": 0,
                "endColumnIndex": width,
            },
            "rows": out,
            "fields": CELL_FIELDS,
        }
    }
