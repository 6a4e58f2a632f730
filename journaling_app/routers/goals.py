# goals router — goals tied to a wheel-of-life area

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status, Query

from journaling_app.models.tracking import GoalCreate, GoalUpdate, GoalResponse
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import new_record_id, now_iso
from journaling_app.dependencies import get_current_user, fetch_owned

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/goals", tags=["goals"])


def doc_to_goal(doc: dict) -> GoalResponse:
    return GoalResponse(
        id=doc["id"],
        userId=doc["user_id"],
        title=doc.get("title", ""),
        description=doc.get("description") or "",
        targetDate=doc.get("target_date"),
        lifeAreaId=doc.get("life_area_id"),
        priority=doc.get("priority") or "medium",
        category=doc.get("category") or "",
        status=doc.get("status") or "pending",
        progress=doc.get("progress") or 0,
        createdAt=doc.get("created_at", ""),
        updatedAt=doc.get("updated_at"),
    )


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    status_filter: Optional[str] = Query(None, alias="status"),
    life_area: Optional[str] = Query(None, alias="lifeArea"),
    limit: int = Query(50, ge=1, le=500),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """own goals; `all` for status or lifeArea disables that filter"""
    query = {"user_id": current_user["id"]}
    if status_filter and status_filter != "all":
        query["status"] = status_filter
    if life_area and life_area != "all":
        query["life_area_id"] = life_area
    cursor = db.goals.find(query).sort("created_at", -1).skip(skip).limit(limit)
    return [doc_to_goal(doc) async for doc in cursor]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    body: GoalCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = now_iso()
    doc = {
        "id": new_record_id(current_user["id"], body.title),
        "user_id": current_user["id"],
        **body.model_dump(),
        "status": "pending",
        "progress": 0,
        "created_at": now,
        "updated_at": now,
    }
    await db.goals.insert_one(doc)
    logger.info(f"Goal {doc['id']} created in area {body.life_area_id}")
    return doc_to_goal(doc)


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: str,
    body: GoalUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    doc = await fetch_owned(db.goals, goal_id, current_user, "Goal")
    updates = body.model_dump(exclude_unset=True)
    if updates:
        updates["updated_at"] = now_iso()
        await db.goals.update_one({"id": goal_id}, {"$set": updates})
    return doc_to_goal({**doc, **updates})


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    await fetch_owned(db.goals, goal_id, current_user, "Goal")
    await db.goals.delete_one({"id": goal_id})
    logger.info(f"Goal {goal_id} deleted")
