"""Daily, weekly and monthly canvassing report models.

Daily reports are entered by the canvasser; weekly and monthly reports are
derived by the aggregation engine and never edited by hand. Stored JSON uses
camelCase keys (``hoursWorked``, ``weekStartDate``) via the alias generator.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Daily counters in display order. Weekly/monthly totals mirror these.
DAILY_COUNTERS = (
    "hours_worked",
    "books_sold",
    "daily_amount",
    "free_literature",
    "vop_activities",
    "church_attendees",
    "back_slides_visited",
    "prayers_offered",
    "bible_studies",
    "baptism_candidates",
    "baptisms_performed",
    "people_visited",
)

# weekly total field -> daily counter it sums
WEEKLY_TOTALS = {
    "total_hours": "hours_worked",
    "total_books_sold": "books_sold",
    "total_amount": "daily_amount",
    "total_free_literature": "free_literature",
    "total_vop_activities": "vop_activities",
    "total_church_attendees": "church_attendees",
    "total_back_slides_visited": "back_slides_visited",
    "total_prayers_offered": "prayers_offered",
    "total_bible_studies": "bible_studies",
    "total_baptism_candidates": "baptism_candidates",
    "total_baptisms_performed": "baptisms_performed",
    "total_people_visited": "people_visited",
}


class CamelModel(BaseModel):
    """Base model serializing to the camelCase storage layout."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class BookSale(CamelModel):
    """One title sold during a canvassing day."""

    id: str = ""
    title: str = ""
    price: Decimal = Decimal("0")
    quantity: int = 0

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def _blank_is_zero(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class DailyReport(CamelModel):
    """A single canvasser-day. At most one per calendar date."""

    id: str = ""
    date: dt.date
    student_name: str = ""
    phone_number: str = ""

    hours_worked: Decimal = Decimal("0")
    books_sold: int = 0
    daily_amount: Decimal = Decimal("0")
    free_literature: int = 0
    vop_activities: int = 0
    church_attendees: int = 0
    back_slides_visited: int = 0
    prayers_offered: int = 0
    bible_studies: int = 0
    baptism_candidates: int = 0
    baptisms_performed: int = 0
    people_visited: int = 0

    book_sales: list[BookSale] = Field(default_factory=list)
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator(*DAILY_COUNTERS, mode="before")
    @classmethod
    def _blank_is_zero(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value

    @model_validator(mode="after")
    def _derive_sales_totals(self) -> DailyReport:
        # Explicit booksSold/dailyAmount only count when no sale lines exist.
        if self.book_sales:
            self.books_sold = sum(sale.quantity for sale in self.book_sales)
            self.daily_amount = sum((sale.line_total for sale in self.book_sales), Decimal("0"))
        return self


class WeeklyReport(CamelModel):
    """Aggregate of the daily reports in one six-day working week."""

    id: str
    week_number: int
    week_start_date: dt.date
    week_end_date: dt.date
    student_name: str = ""
    phone_number: str = ""

    total_hours: Decimal = Decimal("0")
    total_books_sold: int = 0
    total_amount: Decimal = Decimal("0")
    total_free_literature: int = 0
    total_vop_activities: int = 0
    total_church_attendees: int = 0
    total_back_slides_visited: int = 0
    total_prayers_offered: int = 0
    total_bible_studies: int = 0
    total_baptism_candidates: int = 0
    total_baptisms_performed: int = 0
    total_people_visited: int = 0

    daily_reports: list[DailyReport] = Field(default_factory=list)
    is_locked: bool = False
    created_at: dt.datetime
    updated_at: dt.datetime


class MonthlyReport(CamelModel):
    """Aggregate of the weekly reports starting in one calendar month."""

    id: str
    month: int = Field(ge=1, le=12)
    year: int
    student_name: str = ""
    phone_number: str = ""
    weekly_reports: list[WeeklyReport] = Field(default_factory=list)

    total_hours: Decimal = Decimal("0")
    total_books_sold: int = 0
    total_amount: Decimal = Decimal("0")
    total_free_literature: int = 0
    total_vop_activities: int = 0
    total_church_attendees: int = 0
    total_back_slides_visited: int = 0
    total_prayers_offered: int = 0
    total_bible_studies: int = 0
    total_baptism_candidates: int = 0
    total_baptisms_performed: int = 0
    total_people_visited: int = 0
    total_ministry_activities: int = 0  # bible studies + prayers + baptisms performed

    created_at: dt.datetime
