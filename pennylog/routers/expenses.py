import logging
from typing import Dict

from fastapi import APIRouter, HTTPException

from pennylog.models.expense import CategorizeRequest, NotificationRequest
from pennylog.utils.categorizer import categorize, score_categories
from pennylog.utils.upi_parser import is_refund_notification, is_valid_transaction, parse_upi_notification

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/categorize")
def categorize_expense(payload: CategorizeRequest) -> Dict:
    """
    Suggest a category for an expense that is about to be saved.
    """
    scores = score_categories(payload.note, payload.vendor, payload.amount)
    category = categorize(payload.note, payload.vendor, payload.amount)
    return {"category": category, "scores": scores}


@router.post("/notifications")
def parse_notification(payload: NotificationRequest) -> Dict:
    """
    Turn a UPI payment notification into a prefilled expense with a suggested category.
    """
    if is_refund_notification(payload.title, payload.text):
        logger.info("Ignoring refund notification")
        return {"refund": True, "transaction": None, "suggested_category": None}

    txn = parse_upi_notification(payload.title, payload.text, payload.package_name or "")
    if not is_valid_transaction(txn):
        raise HTTPException(
            status_code=422,
            detail="Notification is not a recognisable payment",
        )

    suggested = categorize(payload.text, txn.app_name or payload.title, txn.amount)
    logger.info(f"Parsed {txn.app_source} payment to {txn.merchant}, suggested {suggested}")
    return {"refund": False, "transaction": txn.to_dict(), "suggested_category": suggested}
