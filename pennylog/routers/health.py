"""
Health Check Router
Simple health check endpoint
"""
from fastapi import APIRouter, HTTPException
from datetime import datetime, timezone
import logging

from pennylog.core.config import settings
from pennylog.core.exceptions import RuleTableError
from pennylog.utils.rules import get_category_rules

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status and the categories the rule table was loaded with.
    """
    try:
        rules = get_category_rules()
    except RuleTableError as e:
        logger.error(f"Category rules unavailable: {str(e)}")
        raise HTTPException(status_code=503, detail="Category rules unavailable")

    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "categories": [rule.name for rule in rules],
    }
