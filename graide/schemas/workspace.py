from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("graide.workspace")


class WorkspaceContext(BaseModel):
    """Bootstrap identifiers cached between sessions to skip rediscovery."""

    folder_id: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    organized_folder_id: Optional[str] = None


class WorkspaceStateStore:
    """Explicit load/save hooks for the WorkspaceContext, backed by a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> WorkspaceContext:
        if not self.path.exists():
            return WorkspaceContext()
        try:
            return WorkspaceContext.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Workspace state unreadable, starting empty", extra={"path": str(self.path)})
            return WorkspaceContext()

    def save(self, context: WorkspaceContext) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(context.model_dump(), indent=2), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class WorkspaceStatus(BaseModel):
    is_initialized: bool
    folder_id: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    organized_folder_id: Optional[str] = None
    schema_version: Optional[int] = None
    error: Optional[str] = None


class ReconciliationResult(BaseModel):
    previous_version: int
    current_version: int
    up_to_date: bool
    created_tables: list[str] = Field(default_factory=list)
