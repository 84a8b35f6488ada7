from fastapi import APIRouter

from graide.core.deps import ConfigRepoDep
from graide.schemas.entities import ConfigEntry
from graide.schemas.payloads import ConfigValue

router = APIRouter(prefix="/config")

@router.get("", response_model=list[ConfigEntry])
async def list_config(repo: ConfigRepoDep):
    return await repo.all()

@router.put("/{key}", response_model=ConfigEntry)
async def set_config(key: str, payload: ConfigValue, repo: ConfigRepoDep):
    return await repo.set_value(key, payload.value)
