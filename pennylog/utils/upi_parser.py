"""
UPI payment notification parser.

Payment apps (Google Pay, PhonePe, Paytm, BHIM, Amazon Pay) post a
notification for every debit. This module pulls the amount, merchant and
reference out of that text so the host can prefill an expense and run it
through the categorizer.
"""
from __future__ import annotations

import hashlib
import logging
import re
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PAYMENT_KEYWORDS = ("paid", "sent", "debited", "transferred", "payment")
REFUND_KEYWORDS = ("refund", "reversed", "credited", "credited back", "failed")
MAX_TRANSACTION_AMOUNT = 100000
MAX_MERCHANT_LENGTH = 100

_AMOUNT_PATTERNS = (
    re.compile(r"₹\s*([0-9,]+(?:\.[0-9]{1,2})?)"),
    re.compile(r"Rs\.?\s*([0-9,]+(?:\.[0-9]{1,2})?)", re.IGNORECASE),
    re.compile(r"INR\s*([0-9,]+(?:\.[0-9]{1,2})?)", re.IGNORECASE),
)

_MERCHANT_PATTERNS = {
    # "You paid ₹350 to Zomato"
    "gpay": re.compile(r"(?:paid|sent).*?to\s+([A-Za-z0-9\s&-]+?)(?:\.|$|\bfor\b|\bvia\b|\bupi\b)", re.IGNORECASE),
    # "Payment of ₹350 to ZOMATO successful"
    "phonepe": re.compile(r"(?:payment|paid).*?to\s+([A-Za-z0-9\s&-]+?)(?:\s+successful|$)", re.IGNORECASE),
    # "₹350 paid to Zomato"
    "paytm": re.compile(r"paid to\s+([A-Za-z0-9\s&-]+?)(?:\.|$)", re.IGNORECASE),
}
_GENERIC_MERCHANT = re.compile(r"to\s+([A-Z][A-Za-z0-9\s&-]+?)(?:\.|$|\bvia\b|\bupi\b|\bfor\b)")

_TRANSACTION_ID_PATTERNS = (
    re.compile(r"(?:UPI|Ref|ID|Transaction)[\s:]+([A-Z0-9]{12,20})", re.IGNORECASE),
    re.compile(r"Txn\s+(?:ID|Ref)[\s:]+([A-Z0-9]{12,20})", re.IGNORECASE),
)

_LOCATION_SUFFIX = re.compile(r"\s+(LTD|PVT|PRIVATE|LIMITED|INDIA|PTE|BANGALORE|MUMBAI|DELHI|PUNE|INC)$", re.IGNORECASE)
_SERVICE_SUFFIX = re.compile(r"\s+(ONLINE|SERVICES|TECHNOLOGIES|TECH|PAY|PAYMENTS)$", re.IGNORECASE)

KNOWN_MERCHANTS = {
    "ZOMATO": "Zomato",
    "SWIGGY": "Swiggy",
    "SWGY": "Swiggy",
    "AMAZON": "Amazon",
    "AMZN": "Amazon",
    "FLIPKART": "Flipkart",
    "UBER": "Uber",
    "OLA": "Ola",
    "RAPIDO": "Rapido",
    "BIG BASKET": "BigBasket",
    "BIGBASKET": "BigBasket",
    "GROFERS": "Blinkit",
    "BLINKIT": "Blinkit",
    "DUNZO": "Dunzo",
    "ZEPTO": "Zepto",
    "MYNTRA": "Myntra",
    "AJIO": "Ajio",
    "NYKAA": "Nykaa",
    "PAYTM MALL": "Paytm",
    "BOOKMYSHOW": "BookMyShow",
    "IRCTC": "IRCTC",
    "MAKEMYTRIP": "MakeMyTrip",
    "GOIBIBO": "Goibibo",
    "REDBUS": "RedBus",
}

APP_DISPLAY_NAMES = {
    "gpay": "Google Pay",
    "phonepe": "PhonePe",
    "paytm": "Paytm",
    "bhim": "BHIM",
    "amazonpay": "Amazon Pay",
    "unknown": "",
}


@dataclass
class ParsedTransaction:
    amount: float
    merchant: str
    transaction_id: str
    timestamp: int
    raw: str
    app_source: str = "unknown"

    @property
    def app_name(self) -> str:
        return APP_DISPLAY_NAMES.get(self.app_source, "")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def detect_app_source(package_name: str, title: str) -> str:
    pkg = (package_name or "").lower()
    t = (title or "").lower()

    if "google.android.apps.nbu" in pkg or "google pay" in t or "gpay" in t:
        return "gpay"
    if "phonepe" in pkg or "phonepe" in t:
        return "phonepe"
    if "paytm" in pkg or "paytm" in t:
        return "paytm"
    if "bhim" in pkg or "bhim" in t:
        return "bhim"
    if "amazon" in pkg or "amazon pay" in t:
        return "amazonpay"
    return "unknown"


def extract_amount(text: str) -> Optional[float]:
    """Handles ₹350, Rs.350, Rs 350, INR 350 with optional commas/paise."""
    for pattern in _AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            digits = match.group(1).replace(",", "")
            try:
                return float(digits)
            except ValueError:
                return None
    return None


def normalize_merchant(raw: str) -> str:
    """'ZOMATO BANGALORE' -> 'Zomato'"""
    clean = _LOCATION_SUFFIX.sub("", raw)
    clean = _SERVICE_SUFFIX.sub("", clean).strip()

    known = KNOWN_MERCHANTS.get(clean.upper())
    if known:
        return known
    return " ".join(word[:1].upper() + word[1:] for word in clean.lower().split(" "))


def extract_merchant(text: str, app_source: str) -> Optional[str]:
    pattern = _MERCHANT_PATTERNS.get(app_source)
    if pattern:
        match = pattern.search(text)
        if match:
            return normalize_merchant(match.group(1).strip())

    match = _GENERIC_MERCHANT.search(text)
    if match:
        return normalize_merchant(match.group(1).strip())
    return None


def extract_transaction_id(text: str) -> Optional[str]:
    for pattern in _TRANSACTION_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def fallback_transaction_id(amount: float, merchant: str, timestamp: int) -> str:
    digest = hashlib.sha1(f"{amount}{merchant}{timestamp}".encode("utf-8")).hexdigest()
    return f"TXN{str(int(digest, 16))[:12]}"


def parse_upi_notification(
    title: str,
    text: str,
    package_name: str = "",
    timestamp: Optional[int] = None,
) -> Optional[ParsedTransaction]:
    """
    Parse a payment app notification into a transaction.

    Returns None for anything that is not an outgoing payment with a
    recognisable amount and merchant.
    """
    title = title or ""
    text = text or ""
    combined = f"{title} {text}".lower()
    if not any(keyword in combined for keyword in PAYMENT_KEYWORDS):
        return None

    app_source = detect_app_source(package_name, title)

    amount = extract_amount(text)
    if not amount or amount <= 0:
        logger.debug(f"No amount found in {app_source} notification")
        return None

    merchant = extract_merchant(text, app_source)
    if not merchant:
        logger.debug(f"No merchant found in {app_source} notification")
        return None

    if timestamp is None:
        timestamp = int(time.time() * 1000)
    transaction_id = extract_transaction_id(text) or fallback_transaction_id(amount, merchant, timestamp)

    return ParsedTransaction(
        amount=amount,
        merchant=merchant,
        transaction_id=transaction_id,
        timestamp=timestamp,
        raw=f"{title} - {text}",
        app_source=app_source,
    )


def is_refund_notification(title: str, text: str) -> bool:
    combined = f"{title or ''} {text or ''}".lower()
    return any(keyword in combined for keyword in REFUND_KEYWORDS)


def is_valid_transaction(txn: Optional[ParsedTransaction]) -> bool:
    if txn is None:
        return False
    return (
        0 < txn.amount < MAX_TRANSACTION_AMOUNT
        and 0 < len(txn.merchant) < MAX_MERCHANT_LENGTH
        and len(txn.transaction_id) > 0
    )
