import logging
from typing import Dict

from fastapi import APIRouter, HTTPException

from pennylog.core.exceptions import ValidationError
from pennylog.models.expense import ExpenseBatch
from pennylog.utils.insights import generate_weekly_insights
from pennylog.utils.patterns import analyze_spending_patterns

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/weekly")
def weekly_report(batch: ExpenseBatch) -> Dict:
    """
    Summary, saving tips and breakdowns for one week of expenses.
    The client sends the week it wants analysed.
    """
    logger.info(f"Generating weekly insights for {len(batch.expenses)} expenses")
    try:
        return generate_weekly_insights(batch.expenses).to_dict()
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error generating weekly insights: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/patterns")
def spending_patterns(batch: ExpenseBatch) -> Dict:
    """
    Week-over-week trend and next-week prediction over an expense history.
    """
    logger.info(f"Analyzing spending patterns over {len(batch.expenses)} expenses")
    try:
        return analyze_spending_patterns(batch.expenses).to_dict()
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error analyzing spending patterns: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
