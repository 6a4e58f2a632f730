# analytics router — how check-ins line up with journaling behaviour over a period,
# and how journal wording suggests personality drift

import logging
from datetime import timedelta
from typing import Literal

from fastapi import APIRouter, Depends, Query

from journaling_app.models.analytics import CorrelationAnalysis, PersonalityEvolution
from journaling_app.services import correlation_service, personality_evolution
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import clean_doc, parse_datetime, utcnow
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["analytics"])


async def _recent(collection, user_id: str, since) -> list[dict]:
    cursor = collection.find({"user_id": user_id}).sort("created_at", -1)
    out = []
    async for doc in cursor:
        created = parse_datetime(doc.get("created_at"))
        if created is not None and created >= since:
            out.append(clean_doc(doc))
    return out


@router.get("/correlations", response_model=CorrelationAnalysis)
async def get_correlations(
    period: int = Query(30, ge=1, le=365),
    analysis_type: Literal["all", "mood", "energy", "sleep", "content"] = Query("all", alias="type"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """mood / energy / sleep / content correlations over the last `period` days"""
    since = utcnow() - timedelta(days=period)
    entries = await _recent(db.journal_entries, current_user["id"], since)
    check_ins = await _recent(db.check_ins, current_user["id"], since)
    analysis = correlation_service.analyze_correlations(entries, check_ins, analysis_type)
    logger.info(
        f"Correlations for user {current_user['id']}: {len(entries)} entries, "
        f"{len(check_ins)} check-ins over {period} days"
    )
    return analysis


@router.get("/personality-evolution", response_model=PersonalityEvolution)
async def get_personality_evolution(
    period: int = Query(90, ge=1, le=365),
    granularity: Literal["daily", "weekly", "monthly"] = Query("weekly"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """big five drift read from journal wording over the last `period` days"""
    since = utcnow() - timedelta(days=period)
    entries = await _recent(db.journal_entries, current_user["id"], since)
    check_ins = await _recent(db.check_ins, current_user["id"], since)
    return personality_evolution.build_personality_evolution(entries, check_ins, granularity)
