"""Budget value types: expenses and when they are due."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from vicebank.domain.errors import ValidationError
from vicebank.domain.json_fields import (
    is_number,
    is_record,
    is_string,
    require_fields,
)
from vicebank.utils.date_parser import is_valid_date_string, parse_iso_date


class ExpenseTargetType(str, Enum):
    """Kinds of expense target."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    DATED = "dated"


def is_expense_target_type(value: Any) -> bool:
    return isinstance(value, str) and value in {t.value for t in ExpenseTargetType}


class ExpenseTarget(ABC):
    """When money for an expense is meant to be spent.

    Serialized as ``{"type": <type>, "data": {...}}``.
    """

    type: ExpenseTargetType

    _FIELDS = {"type": is_expense_target_type, "data": is_record}

    @abstractmethod
    def data_json(self) -> dict[str, Any]:
        """Return the type-specific ``data`` payload."""

    def to_json(self) -> dict[str, Any]:
        return {"type": self.type.value, "data": self.data_json()}

    @staticmethod
    def from_json(data: Any) -> "ExpenseTarget":
        """Parse any expense target, dispatching on its ``type``.

        Raises:
            ValidationError: If the JSON or its data payload is invalid
        """
        data = require_fields(data, ExpenseTarget._FIELDS)
        target_type = ExpenseTargetType(data["type"])

        if target_type == ExpenseTargetType.WEEKLY:
            return WeeklyExpenseTarget.from_data(data["data"])
        if target_type == ExpenseTargetType.MONTHLY:
            return MonthlyExpenseTarget.from_data(data["data"])
        return DatedExpenseTarget.from_data(data["data"])


@dataclass(frozen=True)
class WeeklyExpenseTarget(ExpenseTarget):
    """Paid every week on ``day_of_week``, 0 through 6."""

    day_of_week: int
    type = ExpenseTargetType.WEEKLY

    def data_json(self) -> dict[str, Any]:
        return {"dayOfWeek": self.day_of_week}

    @classmethod
    def from_data(cls, data: Any) -> "WeeklyExpenseTarget":
        data = require_fields(data, {"dayOfWeek": is_number})
        if data["dayOfWeek"] < 0 or data["dayOfWeek"] > 6:
            raise ValidationError("Invalid day of week")
        return cls(day_of_week=data["dayOfWeek"])


@dataclass(frozen=True)
class MonthlyExpenseTarget(ExpenseTarget):
    """Paid every month. A ``day_of_month`` of -1 means the last day."""

    day_of_month: int
    type = ExpenseTargetType.MONTHLY

    def data_json(self) -> dict[str, Any]:
        return {"dayOfMonth": self.day_of_month}

    @classmethod
    def from_data(cls, data: Any) -> "MonthlyExpenseTarget":
        data = require_fields(data, {"dayOfMonth": is_number})
        if data["dayOfMonth"] < -1 or data["dayOfMonth"] > 31:
            raise ValidationError("Invalid day of month")
        return cls(day_of_month=data["dayOfMonth"])


@dataclass(frozen=True)
class DatedExpenseTarget(ExpenseTarget):
    """A one-time expense due on a specific calendar date."""

    date: date
    type = ExpenseTargetType.DATED

    def data_json(self) -> dict[str, Any]:
        return {"date": self.date.isoformat()}

    @classmethod
    def from_data(cls, data: Any) -> "DatedExpenseTarget":
        data = require_fields(data, {"date": is_valid_date_string})
        return cls(date=parse_iso_date(data["date"]))


def _is_expense_target_json(value: Any) -> bool:
    try:
        ExpenseTarget.from_json(value)
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class Expense:
    """Money owed during a budget period."""

    id: str
    budget_id: str
    category_id: str
    description: str
    amount: float
    expense_target: ExpenseTarget

    _FIELDS = {
        "id": is_string,
        "budgetId": is_string,
        "categoryId": is_string,
        "description": is_string,
        "amount": is_number,
        "expenseTarget": _is_expense_target_json,
    }

    def with_id(self, new_id: str) -> "Expense":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "budgetId": self.budget_id,
            "categoryId": self.category_id,
            "description": self.description,
            "amount": self.amount,
            "expenseTarget": self.expense_target.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "Expense":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            budget_id=data["budgetId"],
            category_id=data["categoryId"],
            description=data["description"],
            amount=data["amount"],
            expense_target=ExpenseTarget.from_json(data["expenseTarget"]),
        )
