# people router — the people a user writes about
# list responses are enriched from the journal: mention count, last mention and keyword sentiment

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from journaling_app.models.tracking import PersonCreate, PersonUpdate, PersonResponse, JournalMention
from journaling_app.services.db import Database, get_db
from journaling_app.services.insights_service import entry_text, keyword_sentiment
from journaling_app.services.records import load_json, new_record_id, now_iso
from journaling_app.dependencies import get_current_user, fetch_owned

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/people", tags=["people"])


def _doc_to_person(doc: dict, **enrichment) -> PersonResponse:
    mentions = []
    for m in load_json(doc.get("journal_mentions"), []):
        try:
            mentions.append(JournalMention(
                journalId=m.get("journal_id") or m.get("journalId"),
                timestamp=m.get("timestamp", ""),
                context=m.get("context") or "",
                sentiment=m.get("sentiment") if m.get("sentiment") in ("positive", "negative", "neutral") else "neutral",
            ))
        except (ValueError, AttributeError):
            logger.warning(f"Skipping malformed mention on person {doc.get('id')}")

    fields = {
        "id": doc["id"],
        "userId": doc["user_id"],
        "name": doc.get("name", ""),
        "relationship": doc.get("relationship"),
        "displayPicture": doc.get("display_picture"),
        "context": doc.get("context"),
        "frequency": doc.get("frequency") or 0,
        "lastMentioned": doc.get("last_mentioned"),
        "journalMentions": mentions,
        "sentiment": doc.get("sentiment") if doc.get("sentiment") in ("positive", "negative", "neutral") else "neutral",
        "createdAt": doc.get("created_at", ""),
        "updatedAt": doc.get("updated_at"),
    }
    fields.update(enrichment)
    return PersonResponse(**fields)


def _journal_stats(name: str, entries: list[dict]) -> dict:
    """mentions of `name` across entries (newest first)"""
    wanted = name.lower()
    mentioned = [e for e in entries if wanted and wanted in entry_text(e).lower()]
    return {
        "interactionCount": len(mentioned),
        "lastInteraction": mentioned[0].get("created_at") if mentioned else None,
        "sentiment": keyword_sentiment([entry_text(e) for e in mentioned]),
    }


async def _name_taken(db: Database, user_id: str, name: str, exclude_id: str = None) -> bool:
    wanted = name.strip().lower()
    async for doc in db.people.find({"user_id": user_id}):
        if doc.get("id") != exclude_id and (doc.get("name") or "").strip().lower() == wanted:
            return True
    return False


@router.get("", response_model=list[PersonResponse])
async def list_people(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    user_id = current_user["id"]
    entries = [e async for e in db.journal_entries.find({"user_id": user_id}).sort("created_at", -1)]
    people = [p async for p in db.people.find({"user_id": user_id}).sort("name", 1)]
    return [_doc_to_person(p, **_journal_stats(p.get("name") or "", entries)) for p in people]


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def create_person(
    body: PersonCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    name = body.name.strip()
    if not name or not body.relationship.strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Name and relationship are required")
    if await _name_taken(db, current_user["id"], name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Person already exists")

    now = now_iso()
    doc = {
        "id": new_record_id(current_user["id"], name),
        "user_id": current_user["id"],
        "name": name,
        "relationship": body.relationship.strip(),
        "display_picture": body.display_picture,
        "context": body.context,
        "sentiment": "neutral",
        "frequency": 0,
        "last_mentioned": None,
        "journal_mentions": [],
        "created_at": now,
        "updated_at": now,
    }
    await db.people.insert_one(doc)
    logger.info(f"Person {doc['id']} added for user {current_user['id']}")
    return _doc_to_person(doc)


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(person_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = await fetch_owned(db.people, person_id, current_user, "Person")
    entries = [e async for e in db.journal_entries.find({"user_id": current_user["id"]}).sort("created_at", -1)]
    return _doc_to_person(doc, **_journal_stats(doc.get("name") or "", entries))


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: str,
    body: PersonUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    doc = await fetch_owned(db.people, person_id, current_user, "Person")
    updates = body.model_dump(exclude_unset=True, by_alias=False)
    for key in ("name", "relationship"):
        if key in updates:
            updates[key] = updates[key].strip()
            if not updates[key]:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Name and relationship are required",
                )
    if "name" in updates:
        if await _name_taken(db, current_user["id"], updates["name"], exclude_id=person_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Person already exists")

    if updates:
        updates["updated_at"] = now_iso()
        await db.people.update_one({"id": person_id}, {"$set": updates})
    return _doc_to_person({**doc, **updates})


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_person(person_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    await fetch_owned(db.people, person_id, current_user, "Person")
    await db.people.delete_one({"id": person_id})
    logger.info(f"Person {person_id} deleted")
