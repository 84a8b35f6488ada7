from fastapi import APIRouter, status

from graide.core.deps import StoreDep, WorkspaceDep
from graide.schemas.payloads import WorkspaceSetup
from graide.schemas.workspace import ReconciliationResult, WorkspaceStatus
from graide.services.schema_reconciler import SchemaReconciler

router = APIRouter(prefix="/workspace")

@router.get("", response_model=WorkspaceStatus)
async def workspace_status(workspace: WorkspaceDep):
    return await workspace.verify()

@router.post("/setup", response_model=WorkspaceStatus)
async def workspace_setup(payload: WorkspaceSetup, workspace: WorkspaceDep):
    return await workspace.setup(payload.share_link)

@router.post("/reinitialize", response_model=WorkspaceStatus)
async def workspace_reinitialize(workspace: WorkspaceDep):
    return await workspace.reinitialize()

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def workspace_reset(workspace: WorkspaceDep):
    workspace.reset()

@router.post("/reconcile", response_model=ReconciliationResult)
async def workspace_reconcile(store: StoreDep):
    return await SchemaReconciler(store).reconcile()
