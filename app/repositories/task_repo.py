import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Task
from app.repositories.task_query import TaskListParams, build_task_query
from app.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise


async def create_task(db: AsyncSession, user_id: UUID, data: TaskCreate) -> Task:
    t = Task(
        user_id=user_id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
    )
    db.add(t)
    await _commit(db)
    await db.refresh(t)
    logger.info("Created task %s for user %s", t.id, user_id)
    return t


async def get_task_owned(db: AsyncSession, user_id: UUID, task_id: UUID) -> Task | None:
    res = await db.execute(select(Task).where(Task.id == task_id, Task.user_id == user_id))
    return res.scalar_one_or_none()


async def list_tasks(db: AsyncSession, user_id: UUID, params: TaskListParams) -> tuple[list[Task], int]:
    rows_stmt, count_stmt = build_task_query(user_id, params)
    total = (await db.execute(count_stmt)).scalar_one()
    res = await db.execute(rows_stmt)
    return list(res.scalars()), total


async def update_task(db: AsyncSession, task: Task, changes: TaskUpdate) -> Task:
    supplied = changes.model_fields_set
    if "title" in supplied:
        task.title = changes.title
    if "description" in supplied:
        task.description = changes.description
    if "status" in supplied:
        task.status = changes.status
    if "priority" in supplied:
        task.priority = changes.priority
    await _commit(db)
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task: Task) -> None:
    await db.delete(task)
    await _commit(db)
    logger.info("Deleted task %s for user %s", task.id, task.user_id)
