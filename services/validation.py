"""
Input validation for transaction mutations.

Create payloads are validated against the full schema; update payloads only
against the fields they supply. Failures raise ``errors.ValidationError``
carrying one message per offending field.
"""

import datetime as dt
import uuid
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from errors import ValidationError
from repositories.patch_builder import build_patch

AMOUNT_LIMIT = Decimal("999999999999.99")
CENT = Decimal("0.01")
MIN_DATE = dt.date(1800, 1, 1)
DESCRIPTION_MAX_LENGTH = 255

# Furthest-ahead time zone, so "today" anywhere on Earth is accepted
LATEST_TIMEZONE = dt.timezone(dt.timedelta(hours=14))


def _amount(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise PydanticCustomError("amount_type", "Amount must be a valid currency amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise PydanticCustomError("amount_type", "Amount must be a valid currency amount")
    if not amount.is_finite():
        raise PydanticCustomError("amount_type", "Amount must be a valid currency amount")

    if amount == 0:
        raise PydanticCustomError("amount_zero", "Amount cannot be $0")
    if amount < -AMOUNT_LIMIT:
        raise PydanticCustomError("amount_min", "Amount is below the minimum allowed value")
    if amount > AMOUNT_LIMIT:
        raise PydanticCustomError("amount_max", "Amount exceeds the maximum allowed value")
    if amount != amount.quantize(CENT):
        raise PydanticCustomError("amount_places", "Amount must have at most 2 decimal places")
    return amount.quantize(CENT)


def _description(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("description_type", "Description must be text")
    value = value.strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError(
            "description_length",
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return value


def _parse_date(value: Any) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def _date(value: Any) -> dt.date:
    parsed = _parse_date(value)
    if parsed is None:
        raise PydanticCustomError("date_type", "Date must be a valid date")
    if parsed < MIN_DATE:
        raise PydanticCustomError("date_min", "Date must be on or after 1800-01-01")
    if parsed > dt.datetime.now(LATEST_TIMEZONE).date():
        raise PydanticCustomError("date_max", "Date cannot be in the future")
    return parsed


def _reference(label: str):
    def validate(value: Any) -> Optional[uuid.UUID]:
        if value is None or value == "":
            return None
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value).strip())
        except ValueError:
            raise PydanticCustomError("uuid", f"{label} must be a valid UUID")
    return validate


Amount = Annotated[Decimal, BeforeValidator(_amount)]
Description = Annotated[Optional[str], BeforeValidator(_description)]
TransactionDate = Annotated[dt.date, BeforeValidator(_date)]
AccountReference = Annotated[Optional[uuid.UUID], BeforeValidator(_reference("Account ID"))]
BudgetCategoryReference = Annotated[Optional[uuid.UUID], BeforeValidator(_reference("Budget category ID"))]


class TransactionCreate(BaseModel):
    """Full schema for a new transaction; unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")

    amount: Amount
    description: Description = None
    date: TransactionDate
    account_id: AccountReference = None
    budget_category_id: BudgetCategoryReference = None


class TransactionUpdate(BaseModel):
    """
    Partial schema for updates.
    Only supplied fields are validated; amount and date may not be cleared.
    """
    model_config = ConfigDict(extra="ignore")

    amount: Amount = None
    description: Description = None
    date: TransactionDate = None
    account_id: AccountReference = None
    budget_category_id: BudgetCategoryReference = None


def _field_errors(error: PydanticValidationError) -> Dict[str, str]:
    """Keep the first message reported for each field."""
    errors: Dict[str, str] = {}
    for detail in error.errors():
        field = str(detail["loc"][0]) if detail["loc"] else "transaction"
        errors.setdefault(field, detail["msg"])
    return errors


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError(errors={"transaction": "Transaction must be an object"})
    return payload


def parse_create(payload: Any) -> TransactionCreate:
    """Validate a create payload against the full schema."""
    try:
        return TransactionCreate.model_validate(_require_mapping(payload))
    except PydanticValidationError as e:
        raise ValidationError(errors=_field_errors(e))


def parse_update(payload: Any) -> Dict[str, Any]:
    """
    Validate the supplied fields of an update payload.

    Returns:
        Normalized changes keyed by field, in mutable-field order; empty when
        nothing updatable was supplied
    """
    try:
        fields = TransactionUpdate.model_validate(_require_mapping(payload))
    except PydanticValidationError as e:
        raise ValidationError(errors=_field_errors(e))
    return dict(build_patch(fields))


def parse_id(value: Any, field: str = "transaction_id") -> uuid.UUID:
    """Parse a transaction identifier, reporting failures under ``field``."""
    if value is None or value == "":
        raise ValidationError(errors={field: "Missing transaction ID"})
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value).strip())
    except ValueError:
        raise ValidationError(errors={field: "Transaction ID must be a valid UUID"})


def parse_ids(values: Any, field: str = "transaction_ids") -> List[uuid.UUID]:
    """Parse a non-empty list of transaction identifiers."""
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple, set, frozenset)) or not values:
        raise ValidationError(errors={field: "Missing transaction IDs"})
    ids: List[uuid.UUID] = []
    for value in values:
        try:
            ids.append(parse_id(value, field))
        except ValidationError:
            raise ValidationError(errors={field: "Transaction IDs must be valid UUIDs"})
    return ids
