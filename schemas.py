"""
Database Schemas for the Cost Optimizer API

Each stored Pydantic model maps to a MongoDB collection.
Field names are snake_case in Python and in MongoDB, camelCase on the wire.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Naive UTC now, truncated to the millisecond precision MongoDB stores."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class Category(str, Enum):
    CLOUD_SERVICES = "Cloud Services"
    SOFTWARE_LICENSES = "Software Licenses"
    MARKETING = "Marketing"
    OPERATIONS = "Operations"
    HUMAN_RESOURCES = "Human Resources"
    OFFICE_SUPPLIES = "Office Supplies"
    TRAVEL = "Travel"
    OTHER = "Other"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class ExpenseCreate(CamelModel):
    """
    User-supplied expense fields, with the rules every stored expense obeys.
    Collection: "expense"
    """
    category: Category = Field(..., description="One of the fixed business categories")
    description: str = Field(..., description="What the money was spent on")
    amount: float = Field(..., ge=0, strict=True, allow_inf_nan=False, description="Amount spent")
    date: datetime = Field(default_factory=utcnow, description="When the expense occurred")
    optimizable: bool = Field(False, description="Candidate for cost reduction")
    savings: float = Field(0, ge=0, strict=True, allow_inf_nan=False, description="Potential savings if optimized")

    @field_validator("description")
    @classmethod
    def _strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description must not be empty")
        return v

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v.replace(microsecond=v.microsecond // 1000 * 1000)


class ExpenseUpdate(CamelModel):
    """
    Partial update. Only keys present in the request are applied, so an
    explicit 0, false or "" is a real value rather than "not supplied".
    """
    category: Optional[Category] = None
    description: Optional[str] = None
    amount: Optional[float] = Field(None, strict=True)
    date: Optional[datetime] = None
    optimizable: Optional[bool] = None
    savings: Optional[float] = Field(None, strict=True)


class Expense(ExpenseCreate):
    """Stored expense record."""
    id: str
    created_at: datetime
    updated_at: datetime


EDITABLE_FIELDS = ("category", "description", "amount", "date", "optimizable", "savings")


class MonthlyTotal(CamelModel):
    year: int
    month: int
    total: float
    count: int


class AnalyticsSummary(CamelModel):
    """Derived on demand from all expenses; never persisted."""
    total_expenses: float
    total_savings: float
    optimizable_count: int
    category_breakdown: Dict[str, float]
    savings_percentage: float
    monthly_trend: List[MonthlyTotal]
    total_count: int
