# tasks router — to-dos, manual or extracted from journal entries

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status, Query

from journaling_app.models.tracking import TaskCreate, TaskUpdate, TaskResponse, TaskStatus
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import new_record_id, now_iso, utcnow
from journaling_app.dependencies import get_current_user, fetch_owned

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tasks", tags=["tasks"])


def _doc_to_task(doc: dict) -> TaskResponse:
    return TaskResponse(
        id=doc["id"],
        title=doc.get("title") or doc.get("description") or "",
        description=doc.get("description"),
        status=doc.get("status") or "pending",
        priority=doc.get("priority") or "medium",
        startDate=doc.get("start_date"),
        deadline=doc.get("deadline"),
        category=doc.get("category"),
        assignee=doc.get("assignee"),
        remarks=doc.get("remarks"),
        isCompleted=bool(doc.get("is_completed")),
        completedDate=doc.get("completed_date"),
        source=doc.get("source") or "manual",
        journalEntryId=doc.get("journal_entry_id"),
        createdAt=doc.get("created_at", ""),
    )


def _completion_fields(task_status: Optional[str], updates: dict) -> dict:
    """keep is_completed / completed_date in step with the status"""
    if task_status == "completed":
        updates.setdefault("is_completed", True)
        if not updates.get("completed_date"):
            updates["completed_date"] = utcnow().date().isoformat()
    elif task_status is not None:
        updates.setdefault("is_completed", False)
        updates.setdefault("completed_date", None)
    return updates


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    limit: int = Query(50, ge=1, le=500),
    skip: int = Query(0, ge=0),
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    query = {"user_id": current_user["id"]}
    if status_filter:
        query["status"] = status_filter
    cursor = db.tasks.find(query).sort("created_at", -1).skip(skip).limit(limit)
    return [_doc_to_task(doc) async for doc in cursor]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = now_iso()
    doc = {
        "id": new_record_id(current_user["id"], body.title),
        "user_id": current_user["id"],
        **body.model_dump(),
        "source": "manual",
        "journal_entry_id": None,
        "created_at": now,
        "updated_at": now,
    }
    _completion_fields(body.status, doc)
    await db.tasks.insert_one(doc)
    logger.info(f"Task {doc['id']} created for user {current_user['id']}")
    return _doc_to_task(doc)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return _doc_to_task(await fetch_owned(db.tasks, task_id, current_user, "Task"))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    doc = await fetch_owned(db.tasks, task_id, current_user, "Task")
    updates = _completion_fields(body.status, body.model_dump(exclude_unset=True))
    if updates:
        updates["updated_at"] = now_iso()
        await db.tasks.update_one({"id": task_id}, {"$set": updates})
    return _doc_to_task({**doc, **updates})


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    await fetch_owned(db.tasks, task_id, current_user, "Task")
    await db.tasks.delete_one({"id": task_id})
    logger.info(f"Task {task_id} deleted")
