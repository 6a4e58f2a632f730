# wheel of life router — area scores, priorities, journal-derived area stats
# and the ai first-time assessment

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from journaling_app.models.wellbeing import (
    DEFAULT_LIFE_AREAS,
    LifeArea,
    WheelOfLifeSave,
    PrioritiesUpdate,
    WheelOfLifeDoc,
    WheelOfLifeResponse,
    AreaStats,
    AreaDetail,
    AreaScoreUpdate,
    WheelOfLifeAssessment,
)
from journaling_app.models.tracking import MessageResponse
from journaling_app.routers.goals import doc_to_goal
from journaling_app.services import analysis_service, life_area_service
from journaling_app.services.analysis_service import AnalysisError
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import clean_doc, load_json, new_record_id, now_iso
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/wheel-of-life", tags=["wheel-of-life"])

DEFAULTS_BY_ID = {a["id"]: a for a in DEFAULT_LIFE_AREAS}


def _with_defaults(area: LifeArea) -> dict:
    """fill name / description / color / icon of known areas the client left blank"""
    stored = area.model_dump()
    for key, value in DEFAULTS_BY_ID.get(area.id, {}).items():
        if not stored.get(key):
            stored[key] = value
    return stored


def _life_areas(doc: dict) -> list[LifeArea]:
    areas = []
    for raw in load_json(doc.get("life_areas"), []):
        try:
            areas.append(LifeArea.model_validate(raw))
        except ValueError:
            logger.warning(f"Skipping malformed life area on wheel {doc.get('id')}")
    return areas


def _doc_to_wheel(doc: dict) -> WheelOfLifeDoc:
    return WheelOfLifeDoc(
        id=doc["id"],
        userId=doc["user_id"],
        lifeAreas=_life_areas(doc),
        priorities=load_json(doc.get("priorities"), []),
        isCompleted=bool(doc.get("is_completed")),
        createdAt=doc.get("created_at", ""),
        updatedAt=doc.get("updated_at"),
    )


async def _get_wheel(db: Database, user_id: str) -> dict:
    doc = await db.wheel_of_life.find_one({"user_id": user_id})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wheel of Life not found")
    return clean_doc(doc)


async def _entries_oldest_first(db: Database, user_id: str) -> list[dict]:
    return [clean_doc(e) async for e in db.journal_entries.find({"user_id": user_id}).sort("created_at", 1)]


@router.post("", response_model=MessageResponse)
async def save_wheel(
    body: WheelOfLifeSave,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """create or replace the user's wheel; saving marks it completed"""
    now = now_iso()
    user_id = current_user["id"]
    payload = {
        "life_areas": [_with_defaults(a) for a in body.life_areas],
        "priorities": body.priorities,
        "is_completed": True,
        "updated_at": now,
    }
    existing = await db.wheel_of_life.find_one({"user_id": user_id})
    if existing:
        wheel_id = existing["id"]
        await db.wheel_of_life.update_one({"id": wheel_id}, {"$set": payload})
    else:
        wheel_id = new_record_id(user_id, "wheel")
        await db.wheel_of_life.insert_one({"id": wheel_id, "user_id": user_id, "created_at": now, **payload})

    logger.info(f"Wheel of life saved for user {user_id} ({len(body.life_areas)} areas)")
    return MessageResponse(message="Wheel of Life saved", id=wheel_id)


@router.get("", response_model=WheelOfLifeResponse)
async def get_wheel(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = await db.wheel_of_life.find_one({"user_id": current_user["id"]})
    if not doc:
        return WheelOfLifeResponse(wheelOfLife=None, priorities=[])
    wheel = _doc_to_wheel(clean_doc(doc))
    return WheelOfLifeResponse(wheelOfLife=wheel, priorities=wheel.priorities)


@router.put("", response_model=MessageResponse)
async def update_priorities(
    body: PrioritiesUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    wheel = await _get_wheel(db, current_user["id"])
    await db.wheel_of_life.update_one(
        {"id": wheel["id"]},
        {"$set": {"priorities": body.priorities, "updated_at": now_iso()}},
    )
    return MessageResponse(message="Priorities updated", id=wheel["id"])


@router.get("/stats", response_model=dict[str, AreaStats])
async def wheel_stats(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """keyword-matched journal statistics for every default area"""
    entries = await _entries_oldest_first(db, current_user["id"])
    return life_area_service.all_area_stats(entries)


@router.post("/assess", response_model=WheelOfLifeAssessment)
async def assess_wheel(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """ai initial assessment of every area, informed by the soulmatrix when one exists"""
    soul_matrix = clean_doc(await db.soul_matrix.find_one({"user_id": current_user["id"]}))
    try:
        return await analysis_service.assess_wheel_of_life(soul_matrix)
    except AnalysisError as e:
        logger.error(f"Wheel of life assessment failed for user {current_user['id']}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Wheel of Life assessment failed")


@router.get("/area/{slug}", response_model=AreaDetail)
async def get_area(slug: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    user_id = current_user["id"]
    wheel = await _get_wheel(db, user_id)
    area = next((a for a in _life_areas(wheel) if a.id == slug), None)
    if area is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Life area not found")

    merged = {**DEFAULTS_BY_ID.get(slug, {}), **{k: v for k, v in area.model_dump().items() if v not in ("", None)}}
    priorities = load_json(wheel.get("priorities"), [])
    goals = [doc_to_goal(g) async for g in db.goals.find({"user_id": user_id, "life_area_id": slug}).sort("created_at", -1)]
    entries = await _entries_oldest_first(db, user_id)

    return AreaDetail(
        **merged,
        priority=priorities.index(slug) + 1 if slug in priorities else 0,
        goals=goals,
        **life_area_service.analyze_area(entries, merged),
    )


@router.put("/area/{slug}", response_model=MessageResponse)
async def update_area(
    slug: str,
    body: AreaScoreUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """change one area's scores or description, other areas stay as they are"""
    wheel = await _get_wheel(db, current_user["id"])
    areas = [a.model_dump() for a in _life_areas(wheel)]
    index = next((i for i, a in enumerate(areas) if a["id"] == slug), None)
    if index is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Life area not found")

    changes = body.model_dump(exclude_none=True)
    areas[index] = {**areas[index], **changes}
    await db.wheel_of_life.update_one(
        {"id": wheel["id"]},
        {"$set": {"life_areas": areas, "updated_at": now_iso()}},
    )
    logger.info(f"Life area {slug} updated for user {current_user['id']}: {sorted(changes)}")
    return MessageResponse(message="Life area updated", id=slug)
