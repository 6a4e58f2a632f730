# nudges router — prioritized suggestions plus the user's reactions to them

import logging

from fastapi import APIRouter, Depends, Query

from journaling_app.models.insights import (
    NudgesResponse,
    NudgeInteractionCreate,
    NudgeInteraction,
    NudgeInteractionResult,
)
from journaling_app.services import insights_service
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import new_record_id, now_iso
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/nudges", tags=["nudges"])


def _doc_to_interaction(doc: dict) -> NudgeInteraction:
    return NudgeInteraction(
        id=doc["id"],
        nudgeId=doc["nudge_id"],
        action=doc.get("action", ""),
        feedback=doc.get("feedback"),
        timestamp=doc.get("created_at", ""),
    )


@router.get("", response_model=NudgesResponse)
async def get_nudges(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    data = await insights_service.gather_user_data(db, current_user["id"])
    return await insights_service.build_nudges(data)


@router.post("", response_model=NudgeInteractionResult)
async def record_interaction(
    body: NudgeInteractionCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """remember whether a nudge was dismissed, completed, snoozed or ignored"""
    doc = {
        "id": new_record_id(current_user["id"], body.nudge_id, body.action),
        "user_id": current_user["id"],
        "nudge_id": body.nudge_id,
        "action": body.action,
        "feedback": body.feedback,
        "created_at": now_iso(),
    }
    await db.nudge_interactions.insert_one(doc)
    logger.info(f"Nudge {body.nudge_id} {body.action} by user {current_user['id']}")
    return NudgeInteractionResult(success=True, result=_doc_to_interaction(doc))


@router.get("/interactions", response_model=list[NudgeInteraction])
async def list_interactions(
    limit: int = Query(50, ge=1, le=500),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    cursor = db.nudge_interactions.find({"user_id": current_user["id"]}).sort("created_at", -1).limit(limit)
    return [_doc_to_interaction(doc) async for doc in cursor]
