# insights router — rule-based and ai insights over everything the user has recorded

import logging

from fastapi import APIRouter, Depends

from journaling_app.models.insights import EnhancedInsights
from journaling_app.services import insights_service
from journaling_app.services.db import Database, get_db
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("", response_model=EnhancedInsights)
async def get_insights(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    data = await insights_service.gather_user_data(db, current_user["id"])
    insights = await insights_service.generate_enhanced_insights(data)
    logger.info(f"Insights generated for user {current_user['id']} ({len(insights.priority)} priority items)")
    return insights
