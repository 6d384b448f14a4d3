from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import AuthContext, Authed
from app.core.errors import NotFoundError
from app.db.models import Task
from app.repositories.task_query import TaskListParams
from app.repositories.task_repo import create_task, delete_task, get_task_owned, list_tasks, update_task
from app.schemas.task import MessageEnvelope, TaskCreate, TaskEnvelope, TaskListEnvelope, TaskOut, TaskUpdate

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


async def _owned_or_404(ctx: AuthContext, task_id: str) -> Task:
    # malformed ids are just another kind of missing task
    try:
        parsed = UUID(task_id)
    except ValueError:
        raise NotFoundError() from None
    t = await get_task_owned(ctx.db, ctx.user_id, parsed)
    if t is None:
        raise NotFoundError()
    return t


@router.post("", response_model=TaskEnvelope, status_code=201)
async def create(payload: TaskCreate, ctx: AuthContext = Depends(Authed)):
    t = await create_task(ctx.db, ctx.user_id, payload)
    return {"success": True, "task": TaskOut.model_validate(t)}


@router.get("", response_model=TaskListEnvelope)
async def get_tasks(
    status: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    sort: Optional[str] = Query(default=None),
    ctx: AuthContext = Depends(Authed),
):
    params = TaskListParams.from_query(status, priority, search, page, limit, sort)
    tasks, total = await list_tasks(ctx.db, ctx.user_id, params)
    return {
        "success": True,
        "count": len(tasks),
        "pagination": {"page": params.page, "limit": params.limit, "total": total},
        "tasks": [TaskOut.model_validate(t) for t in tasks],
    }


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(task_id: str, ctx: AuthContext = Depends(Authed)):
    t = await _owned_or_404(ctx, task_id)
    return {"success": True, "task": TaskOut.model_validate(t)}


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update(task_id: str, payload: TaskUpdate, ctx: AuthContext = Depends(Authed)):
    t = await _owned_or_404(ctx, task_id)
    t = await update_task(ctx.db, t, payload)
    return {"success": True, "task": TaskOut.model_validate(t)}


@router.delete("/{task_id}", response_model=MessageEnvelope)
async def delete(task_id: str, ctx: AuthContext = Depends(Authed)):
    t = await _owned_or_404(ctx, task_id)
    await delete_task(ctx.db, t)
    return {"success": True, "message": "Task deleted successfully"}
