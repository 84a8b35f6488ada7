from fastapi import APIRouter

from graide.core.deps import SettingsDep
from graide.database.tables import SCHEMA_VERSION

router = APIRouter()

@router.get("/health")
async def health_check(cfg: SettingsDep):
    # answers without a bearer token
    return {"status": "ok", "env": cfg.env, "schema_version": SCHEMA_VERSION}
