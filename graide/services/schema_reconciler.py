from __future__ import annotations
import logging
from datetime import date
from typing import Optional

from graide.core.errors import BackendError
from graide.database.repositories import ConfigRepository
from graide.database.table_store import TableStore
from graide.database.tables import SCHEMA_VERSION_KEY, SchemaRegistry, registry
from graide.schemas.workspace import ReconciliationResult
from graide.services.documentation import readme_rows

logger = logging.getLogger("graide.reconciler")


class SchemaReconciler:
    """Brings an existing spreadsheet up to the registry's schema version.

    Only ever adds: missing tabs get created with their header row, the
    README tab is rewritten, and the version marker in Config is bumped last.
    Any failure aborts before the bump, so the next run repeats everything.
    """

    def __init__(self, store: TableStore, schema: SchemaRegistry = registry):
        self.store = store
        self.schema = schema
        self.config = ConfigRepository(store, schema)

    async def stored_version(self) -> int:
        try:
            raw = await self.config.get_value(SCHEMA_VERSION_KEY)
        except BackendError as exc:
            # a spreadsheet from before the Config tab existed: range can't be parsed
            if exc.status_code not in (400, 404):
                raise
            logger.warning("Config table unreadable, assuming schema version 0", extra={"status": exc.status_code})
            return 0
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.warning("Stored schema version is not a number", extra={"value": raw})
            return 0

    async def reconcile(self, today: Optional[date] = None) -> ReconciliationResult:
        previous = await self.stored_version()
        if previous >= self.schema.version:
            logger.debug("Schema up to date", extra={"version": previous})
            return ReconciliationResult(previous_version=previous, current_version=previous, up_to_date=True)

        logger.info("Upgrading schema", extra={"from_version": previous, "to_version": self.schema.version})

        existing = set(await self.store.list_tables())
        wanted = {self.schema.documentation_sheet: []}
        wanted.update({name: self.schema.headers(name) for name in self.schema.table_names})
        missing = {name: headers for name, headers in wanted.items() if name not in existing}
        if missing:
            await self.store.create_tables(missing)

        await self.store.write_documentation(self.schema.documentation_sheet, readme_rows(self.schema, today))
        await self.config.set_value(SCHEMA_VERSION_KEY, str(self.schema.version))

        logger.info(
            "Schema upgraded",
            extra={"from_version": previous, "to_version": self.schema.version, "created_tables": sorted(missing)},
        )
        return ReconciliationResult(
            previous_version=previous,
            current_version=self.schema.version,
            up_to_date=False,
            created_tables=[name for name in wanted if name in missing],
        )
