from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, PlainSerializer, computed_field
from typing import Annotated, Dict, Optional, List
import datetime as dt

# Collections: activity, finance, file

CATEGORIES = (
    "administration",
    "academics",
    "finance",
    "social",
    "community service",
    "documentation",
)

# Two-decimal amounts, sent to the UI as JSON numbers.
Money = Annotated[
    Decimal,
    Field(ge=0, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
SignedMoney = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Activity(BaseModel):
    date: dt.date = Field(...)
    name: str = Field(..., max_length=200)
    category: str = Field(..., pattern=r"^(" + "|".join(CATEGORIES) + r")$")
    duration_hours: float = Field(..., ge=0)
    output: Optional[str] = None
    notes: Optional[str] = None
    file_ids: List[str] = Field(default_factory=list)  # references to File documents


class Finance(BaseModel):
    date: dt.date = Field(...)
    category: str = Field(..., max_length=100)
    income: Money = Decimal("0")
    expense: Money = Decimal("0")
    notes: Optional[str] = None


class File(BaseModel):
    filename: str
    content_type: str
    size: int


# Response models (with id and timestamps)
class DocumentMeta(BaseModel):
    id: str
    created_at: dt.datetime
    updated_at: dt.datetime


class ActivityOut(Activity, DocumentMeta):
    pass


class FinanceOut(Finance, DocumentMeta):
    @computed_field
    @property
    def net(self) -> SignedMoney:
        return self.income - self.expense


class FileOut(File, DocumentMeta):
    pass


class DeleteResult(BaseModel):
    success: bool


class RecapResponse(BaseModel):
    month: int
    year: int
    total_activities: int
    activities_by_category: Dict[str, int]
    total_income: SignedMoney
    total_expense: SignedMoney
    net: SignedMoney
    summary: str


class ReportFormat(str, Enum):
    pdf = "pdf"
    excel = "excel"
