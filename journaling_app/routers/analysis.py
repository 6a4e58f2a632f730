# analysis router — stored analyses across all of a user's finished entries

import logging

from fastapi import APIRouter, Depends, Query

from journaling_app.models.analysis import StoredAnalysis
from journaling_app.routers.journals import _doc_to_analysis
from journaling_app.services.db import Database, get_db
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.get("", response_model=list[StoredAnalysis])
async def list_analyses(
    limit: int = Query(50, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """analyses of completed entries, newest entry first; entries without one are skipped"""
    query = {"user_id": current_user["id"], "processing_status": "completed"}
    cursor = db.journal_entries.find(query).sort("created_at", -1)

    analyses = []
    async for entry in cursor:
        doc = await db.analysis_results.find_one({"journal_entry_id": entry["id"]})
        if doc:
            analyses.append(_doc_to_analysis(doc))
        if len(analyses) >= limit:
            break
    logger.info(f"Listed {len(analyses)} analyses for user {current_user['id']}")
    return analyses
