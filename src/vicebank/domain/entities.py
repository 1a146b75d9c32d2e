"""Domain model entities for vicebank.

These are immutable data classes for the token ledgers: conversion rules
(actions, tasks, purchase prices, deposit conversions), the ledger entries
recorded against them (deposits, task deposits, purchases) and the vice
bank and action bank users whose balance those entries move.

Each entity converts to and from the camelCase JSON stored on disk.
``from_json`` is strict: every field is checked and all failures are
reported together in a single ValidationError.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from vicebank.domain.errors import ValidationError
from vicebank.domain.frequency import Frequency, frequency_from_string, is_frequency
from vicebank.domain.json_fields import (
    is_number,
    is_optional_number,
    is_string,
    require_fields,
)
from vicebank.utils.date_parser import (
    format_zoned_datetime,
    is_valid_datetime_string,
    parse_zoned_datetime,
)


def _parse_date(value: str) -> datetime:
    try:
        return parse_zoned_datetime(value)
    except ValueError:
        raise ValidationError("Invalid date")


def _positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


@dataclass(frozen=True)
class Action:
    """A vice bank conversion rule.

    Every ``deposits_per`` units of ``conversion_unit`` earn ``tokens_per``
    tokens. For instance 15 minutes of walking for 0.25 tokens, or one hour
    for one token, are the same conversion. ``min_deposit`` is the smallest
    quantity a single deposit may log.
    """

    id: str
    vb_user_id: str
    name: str
    conversion_unit: str
    deposits_per: float
    tokens_per: float
    min_deposit: float
    max_deposit: Optional[float] = None

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "name": is_string,
        "conversionUnit": is_string,
        "depositsPer": _positive_number,
        "tokensPer": is_number,
        "minDeposit": is_number,
        "maxDeposit": is_optional_number,
    }

    @property
    def conversion_rate(self) -> float:
        """Tokens earned per single unit deposited."""
        return self.tokens_per / self.deposits_per

    def with_id(self, new_id: str) -> "Action":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "name": self.name,
            "conversionUnit": self.conversion_unit,
            "depositsPer": self.deposits_per,
            "tokensPer": self.tokens_per,
            "minDeposit": self.min_deposit,
        }
        if self.max_deposit is not None:
            data["maxDeposit"] = self.max_deposit
        return data

    @classmethod
    def from_json(cls, data: Any) -> "Action":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            name=data["name"],
            conversion_unit=data["conversionUnit"],
            deposits_per=data["depositsPer"],
            tokens_per=data["tokensPer"],
            min_deposit=data["minDeposit"],
            max_deposit=data.get("maxDeposit"),
        )


@dataclass(frozen=True)
class Deposit:
    """A quantity logged against an action on a date.

    The conversion rate, action name and unit are copied from the action
    when the deposit is made and are never re-read from it afterwards.
    """

    id: str
    vb_user_id: str
    date: datetime
    deposit_quantity: float
    conversion_rate: float
    action_id: str
    action_name: str
    conversion_unit: str

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "date": is_valid_datetime_string,
        "depositQuantity": is_number,
        "conversionRate": is_number,
        "actionId": is_string,
        "actionName": is_string,
        "conversionUnit": is_string,
    }

    @property
    def tokens_earned(self) -> float:
        return self.deposit_quantity * self.conversion_rate

    @property
    def token_delta(self) -> float:
        """Signed contribution of this entry to the owner's balance."""
        return self.tokens_earned

    def with_id(self, new_id: str) -> "Deposit":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "date": format_zoned_datetime(self.date),
            "depositQuantity": self.deposit_quantity,
            "conversionRate": self.conversion_rate,
            "actionId": self.action_id,
            "actionName": self.action_name,
            "conversionUnit": self.conversion_unit,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Deposit":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            date=_parse_date(data["date"]),
            deposit_quantity=data["depositQuantity"],
            conversion_rate=data["conversionRate"],
            action_id=data["actionId"],
            action_name=data["actionName"],
            conversion_unit=data["conversionUnit"],
        )

    @classmethod
    def from_action(
        cls, action: Action, deposit_quantity: float, date: datetime
    ) -> "Deposit":
        """Build an unsaved deposit, freezing the action's current rate."""
        return cls(
            id="",
            vb_user_id=action.vb_user_id,
            date=date,
            deposit_quantity=deposit_quantity,
            conversion_rate=action.conversion_rate,
            action_id=action.id,
            action_name=action.name,
            conversion_unit=action.conversion_unit,
        )


@dataclass(frozen=True)
class Task:
    """A recurring task worth ``tokens_per`` tokens once per period."""

    id: str
    vb_user_id: str
    name: str
    frequency: Frequency
    tokens_per: float

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "name": is_string,
        "frequency": is_frequency,
        "tokensPer": is_number,
    }

    def with_id(self, new_id: str) -> "Task":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "name": self.name,
            "frequency": self.frequency.value,
            "tokensPer": self.tokens_per,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Task":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            name=data["name"],
            frequency=frequency_from_string(data["frequency"]),
            tokens_per=data["tokensPer"],
        )


@dataclass(frozen=True)
class TaskDeposit:
    """A completion of a recurring task.

    Unlike a Deposit, ``tokens_earned`` is stored rather than derived: a
    second completion inside the same period is recorded with zero tokens.
    """

    id: str
    vb_user_id: str
    date: datetime
    task_name: str
    task_id: str
    conversion_rate: float
    frequency: Frequency
    tokens_earned: float

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "date": is_valid_datetime_string,
        "taskName": is_string,
        "taskId": is_string,
        "conversionRate": is_number,
        "frequency": is_frequency,
        "tokensEarned": is_number,
    }

    @property
    def token_delta(self) -> float:
        return self.tokens_earned

    def with_id(self, new_id: str) -> "TaskDeposit":
        return replace(self, id=new_id)

    def with_tokens_earned(self, tokens_earned: float) -> "TaskDeposit":
        return replace(self, tokens_earned=tokens_earned)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "date": format_zoned_datetime(self.date),
            "taskName": self.task_name,
            "taskId": self.task_id,
            "conversionRate": self.conversion_rate,
            "frequency": self.frequency.value,
            "tokensEarned": self.tokens_earned,
        }

    @classmethod
    def from_json(cls, data: Any) -> "TaskDeposit":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            date=_parse_date(data["date"]),
            task_name=data["taskName"],
            task_id=data["taskId"],
            conversion_rate=data["conversionRate"],
            frequency=frequency_from_string(data["frequency"]),
            tokens_earned=data["tokensEarned"],
        )

    @classmethod
    def from_task(cls, task: Task, date: datetime) -> "TaskDeposit":
        """Build an unsaved task deposit worth the task's full reward."""
        return cls(
            id="",
            vb_user_id=task.vb_user_id,
            date=date,
            task_name=task.name,
            task_id=task.id,
            conversion_rate=task.tokens_per,
            frequency=task.frequency,
            tokens_earned=task.tokens_per,
        )


@dataclass(frozen=True)
class PurchasePrice:
    """Something a vice bank user can spend tokens on."""

    id: str
    vb_user_id: str
    name: str
    price: float

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "name": is_string,
        "price": is_number,
    }

    def with_id(self, new_id: str) -> "PurchasePrice":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "name": self.name,
            "price": self.price,
        }

    @classmethod
    def from_json(cls, data: Any) -> "PurchasePrice":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            name=data["name"],
            price=data["price"],
        )


@dataclass(frozen=True)
class Purchase:
    """Tokens spent on a purchase price. The quantity is the token cost."""

    id: str
    vb_user_id: str
    purchase_price_id: str
    purchased_name: str
    date: datetime
    purchased_quantity: float

    _FIELDS = {
        "id": is_string,
        "vbUserId": is_string,
        "purchasePriceId": is_string,
        "purchasedName": is_string,
        "date": is_valid_datetime_string,
        "purchasedQuantity": is_number,
    }

    @property
    def token_delta(self) -> float:
        return -self.purchased_quantity

    def with_id(self, new_id: str) -> "Purchase":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "vbUserId": self.vb_user_id,
            "purchasePriceId": self.purchase_price_id,
            "purchasedName": self.purchased_name,
            "date": format_zoned_datetime(self.date),
            "purchasedQuantity": self.purchased_quantity,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Purchase":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            vb_user_id=data["vbUserId"],
            purchase_price_id=data["purchasePriceId"],
            purchased_name=data["purchasedName"],
            date=_parse_date(data["date"]),
            purchased_quantity=data["purchasedQuantity"],
        )

    @classmethod
    def from_price(
        cls, price: PurchasePrice, purchased_quantity: float, date: datetime
    ) -> "Purchase":
        return cls(
            id="",
            vb_user_id=price.vb_user_id,
            purchase_price_id=price.id,
            purchased_name=price.name,
            date=date,
            purchased_quantity=purchased_quantity,
        )


@dataclass(frozen=True)
class DepositConversion:
    """An action bank conversion rule, owned directly by an account."""

    id: str
    user_id: str
    name: str
    rate_name: str
    deposits_per: float
    tokens_per: float
    min_deposit: float
    max_deposit: float

    _FIELDS = {
        "id": is_string,
        "userId": is_string,
        "name": is_string,
        "rateName": is_string,
        "depositsPer": _positive_number,
        "tokensPer": is_number,
        "minDeposit": is_number,
        "maxDeposit": is_number,
    }

    @property
    def conversion_rate(self) -> float:
        return self.tokens_per / self.deposits_per

    def with_id(self, new_id: str) -> "DepositConversion":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "rateName": self.rate_name,
            "depositsPer": self.deposits_per,
            "tokensPer": self.tokens_per,
            "minDeposit": self.min_deposit,
            "maxDeposit": self.max_deposit,
        }

    @classmethod
    def from_json(cls, data: Any) -> "DepositConversion":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            user_id=data["userId"],
            name=data["name"],
            rate_name=data["rateName"],
            deposits_per=data["depositsPer"],
            tokens_per=data["tokensPer"],
            min_deposit=data["minDeposit"],
            max_deposit=data["maxDeposit"],
        )


@dataclass(frozen=True)
class ViceBankUser:
    """A token account belonging to a login user.

    ``current_tokens`` is maintained incrementally from ledger deltas; it is
    never recomputed from the ledger history.
    """

    id: str
    user_id: str
    name: str
    current_tokens: float

    _FIELDS = {
        "id": is_string,
        "userId": is_string,
        "name": is_string,
        "currentTokens": is_number,
    }

    def with_id(self, new_id: str) -> "ViceBankUser":
        return replace(self, id=new_id)

    def copy_with(self, **changes: Any) -> "ViceBankUser":
        return replace(self, **changes)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "currentTokens": self.current_tokens,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ViceBankUser":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            user_id=data["userId"],
            name=data["name"],
            current_tokens=data["currentTokens"],
        )


@dataclass(frozen=True)
class ActionBankUser:
    """An action bank account. Unlike a vice bank user it has no login owner."""

    id: str
    name: str
    current_tokens: float

    _FIELDS = {
        "id": is_string,
        "name": is_string,
        "currentTokens": is_number,
    }

    def with_id(self, new_id: str) -> "ActionBankUser":
        return replace(self, id=new_id)

    def copy_with(self, **changes: Any) -> "ActionBankUser":
        return replace(self, **changes)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "currentTokens": self.current_tokens,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ActionBankUser":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            name=data["name"],
            current_tokens=data["currentTokens"],
        )


@dataclass(frozen=True)
class ActionBankDeposit:
    """A quantity logged against a deposit conversion.

    The rate and conversion name are frozen when the deposit is made.
    """

    id: str
    user_id: str
    date: datetime
    deposit_quantity: float
    conversion_rate: float
    deposit_conversion_id: str
    deposit_conversion_name: str

    _FIELDS = {
        "id": is_string,
        "userId": is_string,
        "date": is_valid_datetime_string,
        "depositQuantity": is_number,
        "conversionRate": is_number,
        "depositConversionId": is_string,
        "depositConversionName": is_string,
    }

    @property
    def tokens_earned(self) -> float:
        return self.deposit_quantity * self.conversion_rate

    @property
    def token_delta(self) -> float:
        return self.tokens_earned

    def with_id(self, new_id: str) -> "ActionBankDeposit":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "date": format_zoned_datetime(self.date),
            "depositQuantity": self.deposit_quantity,
            "conversionRate": self.conversion_rate,
            "depositConversionId": self.deposit_conversion_id,
            "depositConversionName": self.deposit_conversion_name,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ActionBankDeposit":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            user_id=data["userId"],
            date=_parse_date(data["date"]),
            deposit_quantity=data["depositQuantity"],
            conversion_rate=data["conversionRate"],
            deposit_conversion_id=data["depositConversionId"],
            deposit_conversion_name=data["depositConversionName"],
        )

    @classmethod
    def from_conversion(
        cls, conversion: DepositConversion, deposit_quantity: float, date: datetime
    ) -> "ActionBankDeposit":
        return cls(
            id="",
            user_id=conversion.user_id,
            date=date,
            deposit_quantity=deposit_quantity,
            conversion_rate=conversion.conversion_rate,
            deposit_conversion_id=conversion.id,
            deposit_conversion_name=conversion.name,
        )


@dataclass(frozen=True)
class ActionBankPurchasePrice:
    id: str
    user_id: str
    name: str
    price: float

    _FIELDS = {
        "id": is_string,
        "userId": is_string,
        "name": is_string,
        "price": is_number,
    }

    def with_id(self, new_id: str) -> "ActionBankPurchasePrice":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "price": self.price,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ActionBankPurchasePrice":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            user_id=data["userId"],
            name=data["name"],
            price=data["price"],
        )


@dataclass(frozen=True)
class ActionBankPurchase:
    """Tokens spent by an action bank user. The quantity is the token cost."""

    id: str
    user_id: str
    purchase_price_id: str
    date: datetime
    purchased_quantity: float

    _FIELDS = {
        "id": is_string,
        "userId": is_string,
        "purchasePriceId": is_string,
        "date": is_valid_datetime_string,
        "purchasedQuantity": is_number,
    }

    @property
    def token_delta(self) -> float:
        return -self.purchased_quantity

    def with_id(self, new_id: str) -> "ActionBankPurchase":
        return replace(self, id=new_id)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "purchasePriceId": self.purchase_price_id,
            "date": format_zoned_datetime(self.date),
            "purchasedQuantity": self.purchased_quantity,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ActionBankPurchase":
        data = require_fields(data, cls._FIELDS)
        return cls(
            id=data["id"],
            user_id=data["userId"],
            purchase_price_id=data["purchasePriceId"],
            date=_parse_date(data["date"]),
            purchased_quantity=data["purchasedQuantity"],
        )

    @classmethod
    def from_price(
        cls, price: ActionBankPurchasePrice, purchased_quantity: float, date: datetime
    ) -> "ActionBankPurchase":
        return cls(
            id="",
            user_id=price.user_id,
            purchase_price_id=price.id,
            date=date,
            purchased_quantity=purchased_quantity,
        )
