# entity sync — persist people, finance items and tasks extracted from an entry
# persistence is best effort: a failure here is logged and never fails the analysis

import logging
from typing import Optional

from journaling_app.models.analysis import AnalysisResult, PeopleMentioned, FinanceCue, TaskMentioned
from journaling_app.services.db import Database
from journaling_app.services.records import new_record_id, now_iso, utcnow

logger = logging.getLogger(__name__)


def _today() -> str:
    return utcnow().date().isoformat()


async def _find_person(db: Database, user_id: str, name: str) -> Optional[dict]:
    """case-insensitive lookup of an existing person by name"""
    wanted = name.strip().lower()
    async for doc in db.people.find({"user_id": user_id}):
        if (doc.get("name") or "").strip().lower() == wanted:
            return doc
    return None


async def sync_person(db: Database, user_id: str, entry_id: str, person: PeopleMentioned) -> str:
    """create the person or bump the existing one; returns 'created' or 'updated'"""
    now = now_iso()
    mention = {
        "journal_id": entry_id,
        "timestamp": now,
        "context": person.context,
        "sentiment": person.sentiment,
    }
    existing = await _find_person(db, user_id, person.name)
    if existing:
        await db.people.update_one(
            {"id": existing["id"]},
            {
                "$set": {
                    "frequency": (existing.get("frequency") or 0) + 1,
                    "last_mentioned": now,
                    "sentiment": person.sentiment,
                    "updated_at": now,
                },
                "$push": {"journal_mentions": mention},
            },
        )
        return "updated"

    await db.people.insert_one({
        "id": new_record_id(user_id, person.name),
        "user_id": user_id,
        "name": person.name.strip(),
        "relationship": person.relationship,
        "display_picture": None,
        "context": person.context,
        "sentiment": person.sentiment,
        "frequency": 1,
        "last_mentioned": now,
        "journal_mentions": [mention],
        "created_at": now,
        "updated_at": now,
    })
    return "created"


async def create_finance_from_cue(db: Database, user_id: str, entry_id: str, cue: FinanceCue) -> Optional[str]:
    """finance entry for a cue with an amount; cues without one are skipped"""
    if cue.amount is None:
        return None
    now = now_iso()
    finance_id = new_record_id(user_id, cue.description, cue.amount)
    await db.finance_entries.insert_one({
        "id": finance_id,
        "user_id": user_id,
        "amount": cue.amount,
        "currency": cue.currency or "USD",
        "category": cue.category,
        "subcategory": None,
        "description": cue.description,
        "date": _today(),
        "recurring": False,
        "recurring_pattern": None,
        "priority": "medium",
        "tags": [],
        "notes": cue.context,
        "source": "journal",
        "journal_entry_id": entry_id,
        "created_at": now,
        "updated_at": now,
    })
    return finance_id


async def create_task_from_mention(db: Database, user_id: str, entry_id: str, task: TaskMentioned) -> str:
    now = now_iso()
    completed = task.status == "completed"
    task_id = new_record_id(user_id, task.description)
    await db.tasks.insert_one({
        "id": task_id,
        "user_id": user_id,
        "title": task.description,
        "description": task.description,
        "status": "completed" if completed else "pending",
        "priority": task.priority,
        "start_date": _today(),
        "deadline": task.deadline,
        "category": task.category or None,
        "assignee": None,
        "remarks": None,
        "is_completed": completed,
        "completed_date": _today() if completed else None,
        "source": "journal",
        "journal_entry_id": entry_id,
        "created_at": now,
        "updated_at": now,
    })
    return task_id


async def process_extracted_entities(db: Database, user_id: str, entry_id: str, result: AnalysisResult) -> dict:
    """persist the entities of one analysis, returns per-kind counts"""
    counts = {"people_created": 0, "people_updated": 0, "finance": 0, "tasks": 0}

    for person in result.people or []:
        try:
            outcome = await sync_person(db, user_id, entry_id, person)
            counts[f"people_{outcome}"] += 1
        except Exception as e:
            logger.warning(f"Could not persist person '{person.name}' from entry {entry_id}: {e}")

    for cue in result.finance or []:
        try:
            if await create_finance_from_cue(db, user_id, entry_id, cue):
                counts["finance"] += 1
        except Exception as e:
            logger.warning(f"Could not persist finance cue from entry {entry_id}: {e}")

    for task in result.tasks or []:
        try:
            await create_task_from_mention(db, user_id, entry_id, task)
            counts["tasks"] += 1
        except Exception as e:
            logger.warning(f"Could not persist task from entry {entry_id}: {e}")

    logger.info(f"Entities persisted for entry {entry_id}: {counts}")
    return counts
