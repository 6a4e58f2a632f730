# finance router — income, expenses, investments and debt, manual or extracted from entries

import logging
from collections import defaultdict

from fastapi import APIRouter, Depends, status, Query

from journaling_app.models.tracking import (
    FinanceEntryCreate,
    FinanceEntryUpdate,
    FinanceEntryResponse,
    FinanceSummary,
    CategoryBreakdown,
)
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import load_json, new_record_id, now_iso
from journaling_app.dependencies import get_current_user, fetch_owned

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/finance", tags=["finance"])


def _doc_to_finance(doc: dict) -> FinanceEntryResponse:
    return FinanceEntryResponse(
        id=doc["id"],
        amount=doc.get("amount") or 0,
        currency=doc.get("currency") or "USD",
        category=doc.get("category", "expense"),
        subcategory=doc.get("subcategory"),
        description=doc.get("description") or "",
        date=doc.get("date"),
        recurring=bool(doc.get("recurring")),
        recurringPattern=doc.get("recurring_pattern"),
        priority=doc.get("priority") or "medium",
        tags=load_json(doc.get("tags"), []),
        notes=doc.get("notes"),
        source=doc.get("source") or "manual",
        journalEntryId=doc.get("journal_entry_id"),
        createdAt=doc.get("created_at", ""),
    )


def summarize_finance(entries: list[dict]) -> FinanceSummary:
    """totals per category, net = income - expenses - debt, breakdown share of all money moved"""
    totals = defaultdict(float)
    counts = defaultdict(int)
    for e in entries:
        category = e.get("category", "expense")
        totals[category] += abs(e.get("amount") or 0)
        counts[category] += 1

    overall = sum(totals.values())
    breakdown = [
        CategoryBreakdown(
            category=category,
            amount=round(amount, 2),
            percentage=round(amount / overall * 100, 1) if overall else 0.0,
            count=counts[category],
        )
        for category, amount in sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    ]
    return FinanceSummary(
        totalIncome=round(totals["income"], 2),
        totalExpenses=round(totals["expense"], 2),
        totalInvestments=round(totals["investment"], 2),
        totalDebt=round(totals["debt"], 2),
        net=round(totals["income"] - totals["expense"] - totals["debt"], 2),
        categoryBreakdown=breakdown,
    )


@router.get("", response_model=list[FinanceEntryResponse])
async def list_finance(
    limit: int = Query(50, ge=1, le=500),
    skip: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    cursor = db.finance_entries.find({"user_id": current_user["id"]}).sort("created_at", -1).skip(skip).limit(limit)
    return [_doc_to_finance(doc) async for doc in cursor]


@router.get("/summary", response_model=FinanceSummary)
async def finance_summary(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    entries = [doc async for doc in db.finance_entries.find({"user_id": current_user["id"]})]
    return summarize_finance(entries)


@router.post("", response_model=FinanceEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_finance(
    body: FinanceEntryCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = now_iso()
    doc = {
        "id": new_record_id(current_user["id"], body.description, body.amount),
        "user_id": current_user["id"],
        **body.model_dump(),
        "source": "manual",
        "journal_entry_id": None,
        "created_at": now,
        "updated_at": now,
    }
    await db.finance_entries.insert_one(doc)
    logger.info(f"Finance entry {doc['id']} created for user {current_user['id']}")
    return _doc_to_finance(doc)


@router.get("/{finance_id}", response_model=FinanceEntryResponse)
async def get_finance(finance_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return _doc_to_finance(await fetch_owned(db.finance_entries, finance_id, current_user, "Finance entry"))


@router.put("/{finance_id}", response_model=FinanceEntryResponse)
async def update_finance(
    finance_id: str,
    body: FinanceEntryUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    doc = await fetch_owned(db.finance_entries, finance_id, current_user, "Finance entry")
    updates = body.model_dump(exclude_unset=True)
    if updates:
        updates["updated_at"] = now_iso()
        await db.finance_entries.update_one({"id": finance_id}, {"$set": updates})
    return _doc_to_finance({**doc, **updates})


@router.delete("/{finance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_finance(finance_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    await fetch_owned(db.finance_entries, finance_id, current_user, "Finance entry")
    await db.finance_entries.delete_one({"id": finance_id})
    logger.info(f"Finance entry {finance_id} deleted")
