# check-ins router — quick mood / energy / sleep snapshots and daily trends

import logging
from collections import defaultdict
from datetime import timedelta

from fastapi import APIRouter, Depends, status, Query

from journaling_app.models.tracking import CheckInCreate, CheckInResponse, CheckInTrendPoint, MessageResponse
from journaling_app.services.db import Database, get_db
from journaling_app.services.insights_service import get_mood_score, sleep_total
from journaling_app.services.records import new_record_id, now_iso, parse_datetime, utcnow
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/check-ins", tags=["check-ins"])


def _doc_to_check_in(doc: dict) -> CheckInResponse:
    return CheckInResponse(
        id=doc["id"],
        mood=doc.get("mood", "😐"),
        energy=doc.get("energy", 5),
        movement=doc.get("movement", 5),
        sleepHours=doc.get("sleep_hours", 0),
        sleepMinutes=doc.get("sleep_minutes", 0),
        note=doc.get("note"),
        createdAt=doc.get("created_at", ""),
    )


@router.get("", response_model=list[CheckInResponse])
async def list_check_ins(
    limit: int = Query(10, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    cursor = db.check_ins.find({"user_id": current_user["id"]}).sort("created_at", -1).limit(limit)
    return [_doc_to_check_in(doc) async for doc in cursor]


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_check_in(
    body: CheckInCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = now_iso()
    check_in_id = new_record_id(current_user["id"], body.mood, body.energy)
    await db.check_ins.insert_one({
        "id": check_in_id,
        "user_id": current_user["id"],
        "mood": body.mood,
        "energy": body.energy,
        "movement": body.movement,
        "sleep_hours": body.sleep_hours,
        "sleep_minutes": body.sleep_minutes,
        "note": body.note,
        "created_at": now,
        "updated_at": now,
    })
    logger.info(f"Check-in {check_in_id} saved for user {current_user['id']}")
    return MessageResponse(message="Check-in saved", id=check_in_id)


@router.get("/trends", response_model=list[CheckInTrendPoint])
async def check_in_trends(
    days: int = Query(30, ge=1, le=365),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """per-day averages of mood score, energy and sleep over the last `days` days"""
    since = utcnow() - timedelta(days=days)
    by_day = defaultdict(list)
    async for doc in db.check_ins.find({"user_id": current_user["id"]}):
        created = parse_datetime(doc.get("created_at"))
        if created is None or created < since:
            continue
        by_day[created.date().isoformat()].append(doc)

    points = []
    for day in sorted(by_day):
        rows = by_day[day]
        n = len(rows)
        points.append(CheckInTrendPoint(
            date=day,
            moodScore=round(sum(get_mood_score(r.get("mood")) for r in rows) / n, 1),
            energy=round(sum(r.get("energy") or 0 for r in rows) / n, 1),
            sleepHours=round(sum(sleep_total(r) for r in rows) / n, 1),
            count=n,
        ))
    return points
