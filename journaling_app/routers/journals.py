# journal router — entry crud, stored analyses and the analyze pipeline endpoint
# every entry belongs to one user; foreign entries are 403, missing ones 404

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query

from journaling_app.models.analysis import AnalysisResult, StoredAnalysis
from journaling_app.models.journal import (
    JournalEntryCreate,
    JournalEntryUpdate,
    JournalEntryResponse,
    JournalEntryCreated,
    JournalEntryDetail,
    AnalyzeRequest,
    AnalyzeResponse,
    ProcessingStep,
    UserConfirmed,
)
from journaling_app.services import analysis_service
from journaling_app.services.analysis_service import AnalysisError
from journaling_app.services.entity_sync import process_extracted_entities
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import clean_doc, load_json, new_record_id, now_iso, parse_datetime, utcnow
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/journal", tags=["journal"])

ANALYSIS_FIELDS = ("sentiment", "people", "finance", "tasks", "locations", "temporal", "life_areas", "insights")


def _entry_text(doc: dict) -> str:
    return doc.get("transcription") or doc.get("content") or ""


def _doc_to_entry(doc: dict) -> JournalEntryResponse:
    """convert a journal_entries document to the response model"""
    processing_status = doc.get("processing_status", "draft")
    history = []
    for step in load_json(doc.get("processing_history"), []):
        try:
            history.append(ProcessingStep.model_validate(step))
        except ValueError:
            logger.warning(f"Skipping malformed processing step on entry {doc.get('id')}")

    return JournalEntryResponse(
        id=doc["id"],
        userId=doc["user_id"],
        content=doc.get("content") or "",
        audioUrl=doc.get("audio_url"),
        transcription=doc.get("transcription"),
        entryType=doc.get("entry_type", "text"),
        processingType=doc.get("processing_type", "full-analysis"),
        processingStatus=processing_status,
        tags=load_json(doc.get("tags"), []),
        mood=doc.get("mood"),
        canBeAnalyzed=processing_status in ("draft", "transcribed") and bool(_entry_text(doc).strip()),
        userConfirmed=UserConfirmed(
            transcription=bool(doc.get("user_confirmed_transcription")),
            analysis=bool(doc.get("user_confirmed_analysis")),
        ),
        processingHistory=history,
        createdAt=doc.get("created_at", ""),
        updatedAt=doc.get("updated_at"),
    )


def _doc_to_analysis(doc: dict) -> StoredAnalysis:
    """analysis_results document -> response; legacy json-string fields are decoded"""
    payload = {field: load_json(doc.get(field), None) for field in ANALYSIS_FIELDS}
    return StoredAnalysis(
        id=doc["id"],
        journal_entry_id=doc["journal_entry_id"],
        user_confirmed=bool(doc.get("user_confirmed")),
        created_at=doc.get("created_at", ""),
        updated_at=doc.get("updated_at"),
        **AnalysisResult.model_validate(payload).model_dump(),
    )


async def _get_owned_entry(entry_id: str, current_user: dict, db: Database) -> dict:
    doc = await db.journal_entries.find_one({"id": entry_id})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    if doc.get("user_id") != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your journal entry")
    return clean_doc(doc)


async def _save_analysis(db: Database, entry: dict, result: AnalysisResult, confirmed: bool = False) -> str:
    """replace any stored analysis of the entry with this one"""
    now = now_iso()
    await db.analysis_results.delete_many({"journal_entry_id": entry["id"]})
    analysis_id = new_record_id(entry["user_id"], entry["id"])
    await db.analysis_results.insert_one({
        "id": analysis_id,
        "journal_entry_id": entry["id"],
        "user_id": entry["user_id"],
        **result.model_dump(),
        "user_confirmed": confirmed,
        "created_at": now,
        "updated_at": now,
    })
    return analysis_id


def _step(name: str) -> dict:
    return ProcessingStep(step=name, status="processing", start_time=now_iso()).model_dump()


def _finish_step(step: dict, outcome: str, error: Optional[str] = None) -> dict:
    return {**step, "status": outcome, "end_time": now_iso(), "error": error}


# entries

@router.get("/entries", response_model=list[JournalEntryResponse])
async def list_entries(
    limit: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """own entries, newest first"""
    cursor = db.journal_entries.find({"user_id": current_user["id"]}).sort("created_at", -1).skip(skip).limit(limit)
    return [_doc_to_entry(doc) async for doc in cursor]


@router.post("/entries", response_model=JournalEntryCreated, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: JournalEntryCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = now_iso()
    entry_id = new_record_id(current_user["id"], body.content[:50])
    await db.journal_entries.insert_one({
        "id": entry_id,
        "user_id": current_user["id"],
        "content": body.content,
        "audio_url": body.audio_url,
        "transcription": body.transcription,
        "entry_type": body.entry_type,
        "processing_type": body.processing_type,
        "processing_status": body.processing_status,
        "tags": body.tags,
        "mood": body.mood,
        "user_confirmed_transcription": False,
        "user_confirmed_analysis": False,
        "processing_history": [],
        "created_at": now,
        "updated_at": now,
    })
    logger.info(f"Journal entry {entry_id} created for user {current_user['id']}")
    return JournalEntryCreated(id=entry_id)


@router.get("/entries/{entry_id}", response_model=JournalEntryDetail)
async def get_entry(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """entry plus its stored analysis (null when not analyzed yet)"""
    entry = await _get_owned_entry(entry_id, current_user, db)
    analysis_doc = await db.analysis_results.find_one({"journal_entry_id": entry_id})
    return JournalEntryDetail(
        entry=_doc_to_entry(entry),
        analysis=_doc_to_analysis(analysis_doc) if analysis_doc else None,
    )


@router.put("/entries/{entry_id}", response_model=JournalEntryResponse)
async def update_entry(
    entry_id: str,
    body: JournalEntryUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    entry = await _get_owned_entry(entry_id, current_user, db)
    updates = body.model_dump(exclude_none=True)
    if updates:
        updates["updated_at"] = now_iso()
        await db.journal_entries.update_one({"id": entry_id}, {"$set": updates})
    return _doc_to_entry({**entry, **updates})


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """delete an entry and its analysis; derived finance/task rows keep existing unlinked"""
    await _get_owned_entry(entry_id, current_user, db)
    await db.journal_entries.delete_one({"id": entry_id})
    await db.analysis_results.delete_many({"journal_entry_id": entry_id})
    unlink = {"$set": {"journal_entry_id": None}}
    await db.finance_entries.update_many({"journal_entry_id": entry_id}, unlink)
    await db.tasks.update_many({"journal_entry_id": entry_id}, unlink)
    logger.info(f"Journal entry {entry_id} deleted")


# stored analysis

@router.get("/entries/{entry_id}/analysis", response_model=StoredAnalysis)
async def get_entry_analysis(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    await _get_owned_entry(entry_id, current_user, db)
    doc = await db.analysis_results.find_one({"journal_entry_id": entry_id})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return _doc_to_analysis(doc)


@router.put("/entries/{entry_id}/analysis", response_model=StoredAnalysis)
async def confirm_entry_analysis(
    entry_id: str,
    body: AnalysisResult,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """store the user-edited analysis and mark it confirmed"""
    entry = await _get_owned_entry(entry_id, current_user, db)
    await _save_analysis(db, entry, body, confirmed=True)
    await db.journal_entries.update_one(
        {"id": entry_id},
        {"$set": {"user_confirmed_analysis": True, "updated_at": now_iso()}},
    )
    doc = await db.analysis_results.find_one({"journal_entry_id": entry_id})
    return _doc_to_analysis(doc)


# analyze pipeline

async def _todays_check_ins(db: Database, user_id: str) -> list[dict]:
    today = utcnow().date()
    cursor = db.check_ins.find({"user_id": user_id}).sort("created_at", -1).limit(10)
    check_ins = []
    async for doc in cursor:
        created = parse_datetime(doc.get("created_at"))
        if created and created.date() == today:
            check_ins.append(clean_doc(doc))
    return check_ins


async def _gather_context(db: Database, user_id: str) -> dict:
    soul_matrix = clean_doc(await db.soul_matrix.find_one({"user_id": user_id}))
    wheel = await db.wheel_of_life.find_one({"user_id": user_id})
    return {
        "soul_matrix": soul_matrix,
        "check_ins": await _todays_check_ins(db, user_id),
        "priorities": load_json(wheel.get("priorities"), []) if wheel else [],
    }


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_entry(
    body: AnalyzeRequest,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """run transcribe-only bookkeeping or the full entity extraction pipeline"""
    if not body.entry_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Entry ID is required")

    entry = await _get_owned_entry(body.entry_id, current_user, db)
    entry_id = entry["id"]
    full = body.processing_type == "full-analysis"
    history = list(load_json(entry.get("processing_history"), []))
    step = _step("analysis" if full else "transcription")

    await db.journal_entries.update_one(
        {"id": entry_id},
        {"$set": {"processing_status": "analyzed", "processing_history": history + [step], "updated_at": now_iso()}},
    )

    if not full:
        await db.journal_entries.update_one({"id": entry_id}, {"$set": {
            "processing_status": "transcribed",
            "processing_type": "transcribe-only",
            "processing_history": history + [_finish_step(step, "completed")],
            "updated_at": now_iso(),
        }})
        return AnalyzeResponse(message="Entry transcribed successfully", status="transcribed")

    try:
        content = _entry_text(entry)
        if not content.strip():
            raise AnalysisError("No content available for analysis")

        context = await _gather_context(db, current_user["id"])
        result = await analysis_service.extract_all_entities(
            content,
            soul_matrix=context["soul_matrix"],
            check_ins=context["check_ins"],
            timestamp=parse_datetime(entry.get("created_at")),
            priorities=context["priorities"],
        )
        if all(getattr(result, field) is None for field in ANALYSIS_FIELDS):
            raise AnalysisError("Every entity extraction failed")
    except AnalysisError as e:
        logger.error(f"Analysis of entry {entry_id} failed: {e}")
        await db.journal_entries.update_one({"id": entry_id}, {"$set": {
            "processing_status": "draft",
            "processing_history": history + [_finish_step(step, "failed", str(e))],
            "updated_at": now_iso(),
        }})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Analysis failed: {e}")

    analysis_id = await _save_analysis(db, entry, result)
    await db.journal_entries.update_one({"id": entry_id}, {"$set": {
        "processing_status": "completed",
        "processing_type": "full-analysis",
        "processing_history": history + [_finish_step(step, "completed")],
        "updated_at": now_iso(),
    }})
    await process_extracted_entities(db, current_user["id"], entry_id, result)

    logger.info(f"Analysis {analysis_id} completed for entry {entry_id}")
    return AnalyzeResponse(
        message="Analysis completed successfully",
        status="completed",
        analysisId=analysis_id,
        analysis=result,
    )
