# recaps router — weekly / monthly story recaps and rule-written recap cards
# the llm writes the story; the metrics are always computed here from the period's records

import calendar
import logging
from datetime import datetime, timedelta
from typing import Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, status, Query

from journaling_app.models.wellbeing import (
    RecapGenerateRequest,
    RecapResponse,
    RecapMetrics,
    RecapContent,
    RecapInsights,
    RecapRecommendations,
    LifeAreaImprovement,
    RecapCard,
)
from journaling_app.services import analysis_service, recap_cards
from journaling_app.services.analysis_service import AnalysisError
from journaling_app.services.db import Database, get_db
from journaling_app.services.insights_service import entry_text, get_mood_score, sleep_total
from journaling_app.services.records import clean_doc, load_json, new_record_id, now_iso, parse_datetime, utcnow
from journaling_app.dependencies import get_current_user, fetch_owned

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recaps", tags=["recaps"])


def period_bounds(kind: str, end: datetime) -> tuple[datetime, datetime]:
    """last 7 days, or back to the same day of the previous month"""
    if kind == "weekly":
        return end - timedelta(days=7), end
    year, month = (end.year, end.month - 1) if end.month > 1 else (end.year - 1, 12)
    day = min(end.day, calendar.monthrange(year, month)[1])
    return end.replace(year=year, month=month, day=day), end


def _in_period(value, start: datetime, end: datetime) -> bool:
    when = parse_datetime(value)
    return when is not None and start <= when <= end


def _average(values: list[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def _person_in_period(person: dict, start: datetime, end: datetime) -> bool:
    mentions = load_json(person.get("journal_mentions"), [])
    if any(_in_period(m.get("timestamp"), start, end) for m in mentions if isinstance(m, dict)):
        return True
    return _in_period(person.get("last_mentioned"), start, end)


def _task_completed_in_period(task: dict, start: datetime, end: datetime) -> bool:
    if not (task.get("is_completed") or task.get("status") == "completed"):
        return False
    # completed_date is a bare date; compare on whole days
    done = parse_datetime(task.get("completed_date") or task.get("updated_at"))
    return done is not None and start.date() <= done.date() <= end.date()


def compute_metrics(period: dict) -> RecapMetrics:
    check_ins = period["check_ins"]
    return RecapMetrics(
        entriesCount=len(period["journal_entries"]),
        moodAverage=_average([get_mood_score(c.get("mood")) for c in check_ins]),
        energyAverage=_average([c.get("energy") or 0 for c in check_ins]),
        peopleInteracted=len(period["people"]),
        tasksCompleted=len(period["tasks_completed"]),
        financialInsightsCount=len(period["finance_entries"]),
    )


async def collect_period(db: Database, user_id: str, start: datetime, end: datetime) -> dict:
    async def within(collection, field: str = "created_at"):
        docs = collection.find({"user_id": user_id}).sort("created_at", -1)
        return [clean_doc(d) async for d in docs if _in_period(d.get(field), start, end)]

    tasks = [clean_doc(t) async for t in db.tasks.find({"user_id": user_id})]
    people = [clean_doc(p) async for p in db.people.find({"user_id": user_id})]
    return {
        "journal_entries": await within(db.journal_entries),
        "check_ins": await within(db.check_ins),
        "finance_entries": await within(db.finance_entries),
        "tasks": [t for t in tasks if _in_period(t.get("created_at"), start, end)],
        "tasks_completed": [t for t in tasks if _task_completed_in_period(t, start, end)],
        "people": [p for p in people if _person_in_period(p, start, end)],
        "soul_matrix": clean_doc(await db.soul_matrix.find_one({"user_id": user_id})),
        "wheel_of_life": clean_doc(await db.wheel_of_life.find_one({"user_id": user_id})),
    }


def _prompt_data(kind: str, start: datetime, end: datetime, period: dict) -> dict:
    """render the period's records as the text blocks the recap prompt expects"""
    soul = period["soul_matrix"]
    wheel = period["wheel_of_life"]
    return {
        "period_type": kind,
        "start_date": start.date().isoformat(),
        "end_date": end.date().isoformat(),
        "journal_entries": [
            f"[{e.get('created_at', '')[:10]}] {entry_text(e)}" for e in period["journal_entries"] if entry_text(e)
        ],
        "check_ins": [
            f"{c.get('created_at', '')[:10]}: mood {c.get('mood')}, energy {c.get('energy')}/10, "
            f"sleep {sleep_total(c):.1f}h" + (f", note: {c['note']}" if c.get("note") else "")
            for c in period["check_ins"]
        ],
        "people": [
            f"{p.get('name')} ({p.get('relationship') or 'unknown'}), {p.get('sentiment') or 'neutral'}"
            for p in period["people"]
        ],
        "finance": [
            f"{f.get('category')}: {f.get('amount')} {f.get('currency') or 'USD'} - {f.get('description') or ''}"
            for f in period["finance_entries"]
        ],
        "tasks": [f"{t.get('title')} [{t.get('status') or 'pending'}]" for t in period["tasks"]],
        "soul_matrix": load_json(soul.get("traits"), None) if soul else None,
        "priorities": load_json(wheel.get("priorities"), []) if wheel else [],
    }


def _doc_to_recap(doc: dict) -> RecapResponse:
    return RecapResponse(
        id=doc["id"],
        userId=doc["user_id"],
        type=doc.get("type", "weekly"),
        periodStart=doc.get("period_start", ""),
        periodEnd=doc.get("period_end", ""),
        content=RecapContent.model_validate(load_json(doc.get("content"), {})),
        insights=RecapInsights.model_validate(load_json(doc.get("insights"), {})),
        recommendations=RecapRecommendations.model_validate(load_json(doc.get("recommendations"), {})),
        lifeAreaImprovements=[
            LifeAreaImprovement.model_validate(i) for i in load_json(doc.get("life_area_improvements"), [])
            if isinstance(i, dict) and i.get("area")
        ],
        metrics=RecapMetrics.model_validate(load_json(doc.get("metrics"), {})),
        generatedAt=doc.get("generated_at") or doc.get("created_at", ""),
        viewedAt=doc.get("viewed_at"),
    )


@router.post("/generate", response_model=RecapResponse, status_code=status.HTTP_201_CREATED)
async def generate_recap(
    body: RecapGenerateRequest,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    user_id = current_user["id"]
    start, end = period_bounds(body.type, utcnow())
    period = await collect_period(db, user_id, start, end)

    try:
        generated = await analysis_service.generate_recap(_prompt_data(body.type, start, end, period))
    except AnalysisError as e:
        logger.error(f"Recap generation failed for user {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate recap")

    now = now_iso()
    doc = {
        "id": new_record_id(user_id, body.type, start.isoformat()),
        "user_id": user_id,
        "type": body.type,
        "period_start": start.isoformat(),
        "period_end": end.isoformat(),
        "content": generated.story.model_dump(),
        "insights": generated.insights.model_dump(),
        "recommendations": generated.recommendations.model_dump(),
        "life_area_improvements": [i.model_dump() for i in generated.life_area_improvements],
        "metrics": compute_metrics(period).model_dump(),
        "generated_at": now,
        "viewed_at": None,
        "created_at": now,
    }
    await db.recaps.insert_one(doc)
    logger.info(f"{body.type} recap {doc['id']} generated for user {user_id}")
    return _doc_to_recap(doc)


@router.get("", response_model=list[RecapResponse])
async def list_recaps(
    recap_type: Optional[Literal["weekly", "monthly"]] = Query(None, alias="type"),
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    query = {"user_id": current_user["id"]}
    if recap_type:
        query["type"] = recap_type
    cursor = db.recaps.find(query).sort("created_at", -1).limit(limit)
    return [_doc_to_recap(doc) async for doc in cursor]


@router.get("/cards", response_model=list[RecapCard])
async def get_recap_cards(
    days: int = Query(7, ge=1, le=31),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """rule-written story cards over the last `days` days"""
    user_id = current_user["id"]
    end = utcnow()
    data = {}
    for name in recap_cards.CARD_SOURCES:
        cursor = getattr(db, name).find({"user_id": user_id}).sort("created_at", -1)
        data[name] = [clean_doc(doc) async for doc in cursor]
    return recap_cards.build_recap_cards(data, end - timedelta(days=days), end)


@router.get("/{recap_id}", response_model=RecapResponse)
async def get_recap(recap_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """fetch one recap; the first read stamps viewed_at"""
    doc = await fetch_owned(db.recaps, recap_id, current_user, "Recap")
    if not doc.get("viewed_at"):
        doc["viewed_at"] = now_iso()
        await db.recaps.update_one({"id": recap_id}, {"$set": {"viewed_at": doc["viewed_at"]}})
    return _doc_to_recap(doc)
