from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    NaiveDatetime,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from models import TransactionType

T = TypeVar("T")


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlank = Annotated[str, AfterValidator(_not_blank)]

# Decimals go over the wire as JSON numbers, not strings.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- Auth ----------
class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    name: NonBlank = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)


class JwtResponse(CamelModel):
    token: str
    token_type: str = "Bearer"
    id: int
    name: str
    email: str


class RegisterResponse(CamelModel):
    message: str
    user_id: int


class MessageResponse(CamelModel):
    message: str


# ---------- Categories ----------
class CategoryIn(CamelModel):
    name: NonBlank = Field(max_length=50)
    description: Optional[str] = Field(default=None, max_length=255)


class CategoryOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None


# ---------- Goals ----------
class GoalIn(CamelModel):
    name: NonBlank = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    target_amount: Money = Field(gt=0, max_digits=14, decimal_places=2)
    current_amount: Money = Field(gt=0, max_digits=14, decimal_places=2)
    target_date: date

    @field_validator("target_date")
    @classmethod
    def target_date_in_future(cls, value: date) -> date:
        if value <= date.today():
            raise ValueError("Target date must be in the future")
        return value


class GoalOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    target_amount: Money
    current_amount: Money
    target_date: date
    user_id: int


# ---------- Transactions ----------
class TransactionIn(CamelModel):
    description: NonBlank = Field(max_length=255)
    amount: Money = Field(gt=0, max_digits=14, decimal_places=2)
    date: NaiveDatetime
    type: TransactionType
    category_id: int


class TransactionOut(CamelModel):
    id: int
    description: str
    amount: Money
    date: datetime
    type: TransactionType
    category_id: int
    user_id: int


# ---------- Pages ----------
class PageResponse(CamelModel, Generic[T]):
    content: List[T]
    page_no: int
    page_size: int
    total_elements: int
    total_pages: int
    last: bool


# ---------- Reports ----------
class MonthTotals(CamelModel):
    month: int
    income: Money
    expense: Money


class CategoryTotal(CamelModel):
    category_id: int
    category_name: str
    total: Money


class SummaryResponse(CamelModel):
    year: int
    total_income: Money
    total_expense: Money
    balance: Money
    months: List[MonthTotals]
    expense_by_category: List[CategoryTotal]
