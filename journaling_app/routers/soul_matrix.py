# soulmatrix router — big five personality profile refreshed from completed entries

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from journaling_app.config import settings
from journaling_app.models.wellbeing import (
    BigFiveTraits,
    PersonalityEvolution,
    SoulMatrixDoc,
    SoulMatrixUpdateResponse,
    neutral_traits,
)
from journaling_app.services import analysis_service
from journaling_app.services.analysis_service import AnalysisError
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import clean_doc, load_json, new_record_id, now_iso, utcnow
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/soul-matrix", tags=["soul-matrix"])

ENTRY_WINDOW = 100


def _doc_to_soul_matrix(doc: dict) -> SoulMatrixDoc:
    evolution = []
    for snapshot in load_json(doc.get("evolution"), []):
        try:
            evolution.append(PersonalityEvolution.model_validate(snapshot))
        except ValueError:
            logger.warning(f"Skipping malformed evolution snapshot on soulmatrix {doc.get('id')}")

    return SoulMatrixDoc(
        id=doc["id"],
        userId=doc["user_id"],
        traits=BigFiveTraits.model_validate(load_json(doc.get("traits"), {})),
        evolution=evolution,
        confidence=doc.get("confidence") or 0.0,
        analyzedEntries=load_json(doc.get("analyzed_entries"), []),
        lastUpdated=doc.get("last_updated"),
        nextUpdate=doc.get("next_update"),
    )


@router.get("", response_model=Optional[SoulMatrixDoc])
async def get_soul_matrix(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = await db.soul_matrix.find_one({"user_id": current_user["id"]})
    if not doc:
        return None
    return _doc_to_soul_matrix(clean_doc(doc))


@router.post("/update", response_model=SoulMatrixUpdateResponse)
async def update_soul_matrix(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """feed completed entries the profile has not seen yet to the llm"""
    user_id = current_user["id"]
    current = clean_doc(await db.soul_matrix.find_one({"user_id": user_id}))
    analyzed = load_json(current.get("analyzed_entries"), []) if current else []

    cursor = db.journal_entries.find({"user_id": user_id}).sort("created_at", -1).limit(ENTRY_WINDOW)
    pending = [
        e async for e in cursor
        if e.get("processing_status") == "completed" and e.get("id") not in analyzed
    ]
    if not pending:
        return SoulMatrixUpdateResponse(updated=False, message="No new entries to analyze")

    contents = [
        text for text in ((e.get("transcription") or e.get("content") or "").strip() for e in pending) if text
    ]
    if not contents:
        return SoulMatrixUpdateResponse(updated=False, message="No content to analyze")

    previous = {
        "traits": load_json(current.get("traits"), {}) if current else neutral_traits(),
        "confidence": current.get("confidence", 0.5) if current else 0.5,
    }
    try:
        result = await analysis_service.analyze_soul_matrix(previous, contents, len(analyzed) + len(contents))
    except AnalysisError as e:
        logger.error(f"SoulMatrix update failed for user {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to update SoulMatrix")

    now = utcnow()
    snapshot = result.evolution.model_copy(update={"recorded_at": now.isoformat()})
    evolution = load_json(current.get("evolution"), []) if current else []
    fields = {
        "traits": result.traits.model_dump(),
        "confidence": result.confidence,
        "evolution": [*evolution, snapshot.model_dump()],
        "analyzed_entries": [*analyzed, *(e["id"] for e in pending)],
        "last_updated": now.isoformat(),
        "next_update": (now + timedelta(hours=settings.SOUL_MATRIX_UPDATE_INTERVAL_HOURS)).isoformat(),
        "updated_at": now_iso(),
    }

    if current:
        await db.soul_matrix.update_one({"id": current["id"]}, {"$set": fields})
        doc = {**current, **fields}
    else:
        doc = {"id": new_record_id(user_id, "soul-matrix"), "user_id": user_id, "created_at": now_iso(), **fields}
        await db.soul_matrix.insert_one(doc)

    logger.info(f"SoulMatrix updated for user {user_id} from {len(contents)} new entries")
    return SoulMatrixUpdateResponse(
        updated=True,
        message="SoulMatrix updated successfully",
        soulMatrix=_doc_to_soul_matrix(doc),
        newEntriesAnalyzed=len(contents),
    )
