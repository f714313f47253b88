import logging
import datetime as dt
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from pennylog.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class Expense(BaseModel):
    """An expense record as supplied by the host's storage layer."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)
    date: dt.date = Field(validation_alias=AliasChoices("date", "timestamp"))
    note: Optional[str] = Field(default=None, validation_alias=AliasChoices("note", "description"))
    vendor: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _drop_time(cls, value: Any) -> Any:
        # Stored records carry full ISO timestamps ("2025-11-01T12:00:00Z")
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            try:
                return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
            except ValueError as e:
                raise ValueError(f"invalid date '{value}'") from e
        return value


class CategorizeRequest(BaseModel):
    amount: Decimal = Field(ge=0, allow_inf_nan=False)
    note: Optional[str] = ""
    vendor: Optional[str] = ""


class NotificationRequest(BaseModel):
    title: str
    text: str
    package_name: Optional[str] = ""


class ExpenseBatch(BaseModel):
    # Records are validated by coerce_expenses so a bad one reports its index
    expenses: List[dict] = Field(default_factory=list)


def coerce_expenses(records: Iterable[Any]) -> List[Expense]:
    """Validate a batch of expense records.

    Accepts ``Expense`` instances or plain mappings (e.g. rows returned by the
    host's database layer). The input is never modified.

    Raises:
        ValidationError: on the first record with a malformed date, a negative
            or non-numeric amount, or no category.
    """
    expenses: List[Expense] = []
    for index, record in enumerate(records):
        if isinstance(record, Expense):
            expenses.append(record)
            continue
        try:
            expenses.append(Expense.model_validate(record))
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
                for err in e.errors()
            ]
            logger.warning(f"Rejected expense record at index {index}: {errors}")
            raise ValidationError(f"Invalid expense record at index {index}", index=index, errors=errors) from e
    return expenses
