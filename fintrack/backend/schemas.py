# fintrack/backend/schemas.py
"""
Request schemas checked at the HTTP boundary.

Each route parses its JSON body or query string through one of these
models with ``parse()``, so the services only ever see typed values.
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

TransactionType = Literal["income", "expense"]

M = TypeVar("M", bound=BaseModel)


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def parse_datetime(value) -> datetime:
    """Parse an ISO date or datetime and return it as naive UTC."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            raise ValueError(f"invalid date '{value}', expected ISO format")
    else:
        raise ValueError("date must be an ISO date string")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


class _Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class RegisterRequest(_Schema):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.lower()
        if not EMAIL_RE.match(v):
            raise ValueError("invalid email address")
        return v


class LoginRequest(_Schema):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class TransactionCreate(_Schema):
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=1000)
    date: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_present(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()) or isinstance(v, bool):
            raise ValueError("amount is required")
        return v

    @field_validator("amount")
    @classmethod
    def amount_not_empty(cls, v: float) -> float:
        v = round(v, 2)
        # a zero amount is treated like a missing one
        if v == 0:
            raise ValueError("amount is required")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v):
        return _blank_to_none(v)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        v = _blank_to_none(v)
        return None if v is None else parse_datetime(v)


class MonthQuery(_Schema):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=1, le=9998)

    @field_validator("month", "year", mode="before")
    @classmethod
    def blank_int(cls, v):
        return _blank_to_none(v)

    @property
    def has_month(self) -> bool:
        return self.month is not None and self.year is not None


class TransactionFilters(MonthQuery):
    # category is an exact match and search a literal substring
    model_config = ConfigDict(str_strip_whitespace=False)

    type: Optional[TransactionType] = None
    category: Optional[str] = None
    search: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blanks(cls, data: Any):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if _blank_to_none(v) is not None}
        return data


class CategoryCreate(_Schema):
    name: str = Field(..., min_length=1, max_length=100)
    type: TransactionType


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "body"
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{field}: {msg}")
    return "; ".join(parts)


def parse(schema: Type[M], data: Optional[Dict[str, Any]]) -> M:
    """Validate ``data`` against ``schema`` or raise a 400 ValidationError."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e
