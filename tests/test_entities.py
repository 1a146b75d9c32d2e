"""Tests for domain entities."""

import dataclasses

import pytest

from vicebank.domain.entities import (
    Action,
    ActionBankDeposit,
    ActionBankPurchase,
    ActionBankUser,
    Deposit,
    DepositConversion,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)
from vicebank.domain.errors import ValidationError
from vicebank.domain.frequency import Frequency


def action_json(**overrides):
    data = {
        "id": "action-1",
        "vbUserId": "vb-user-1",
        "name": "Walk",
        "conversionUnit": "minutes",
        "depositsPer": 15,
        "tokensPer": 0.25,
        "minDeposit": 15,
    }
    data.update(overrides)
    return data


def deposit_json(**overrides):
    data = {
        "id": "deposit-1",
        "vbUserId": "vb-user-1",
        "date": "2024-01-01T00:00:00.000-06:00",
        "depositQuantity": 30,
        "conversionRate": 0.5,
        "actionId": "action-1",
        "actionName": "Walk",
        "conversionUnit": "minutes",
    }
    data.update(overrides)
    return data


class TestAction:
    """Tests for Action entity."""

    def test_round_trip(self):
        """Test that to_json undoes from_json."""
        data = action_json(maxDeposit=120)
        action = Action.from_json(data)

        assert action.max_deposit == 120
        assert action.to_json() == data
        assert Action.from_json(action.to_json()) == action

    def test_max_deposit_omitted_when_unset(self):
        """Test that a missing maxDeposit stays missing."""
        action = Action.from_json(action_json())

        assert action.max_deposit is None
        assert "maxDeposit" not in action.to_json()

    def test_conversion_rate(self):
        """Test tokens per single unit."""
        action = Action.from_json(action_json(depositsPer=4, tokensPer=1))
        assert action.conversion_rate == 0.25

    def test_all_invalid_fields_reported(self):
        """Test that every failing field is listed in one error."""
        with pytest.raises(ValidationError) as exc_info:
            Action.from_json({"id": "action-1", "name": 5})

        assert str(exc_info.value) == (
            "Invalid JSON vbUserId, name, conversionUnit, depositsPer, tokensPer, minDeposit"
        )

    def test_non_object_rejected(self):
        """Test that non-object JSON is rejected as a whole."""
        with pytest.raises(ValidationError, match="Invalid JSON root"):
            Action.from_json(["not", "an", "object"])

    def test_deposits_per_must_be_positive(self):
        """Test that a zero rate divisor is rejected."""
        with pytest.raises(ValidationError, match="depositsPer"):
            Action.from_json(action_json(depositsPer=0))

    def test_booleans_are_not_numbers(self):
        """Test that JSON booleans fail number checks."""
        with pytest.raises(ValidationError, match="tokensPer"):
            Action.from_json(action_json(tokensPer=True))

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, value):
        """Test that NaN and infinities fail number checks."""
        with pytest.raises(ValidationError, match="tokensPer"):
            Action.from_json(action_json(tokensPer=value))

    def test_large_integers_accepted(self):
        """Test that integers too large for a float still count as numbers."""
        assert Action.from_json(action_json(minDeposit=10**400)).min_deposit == 10**400

    def test_immutability(self):
        """Test that Action entities are immutable."""
        action = Action.from_json(action_json())
        with pytest.raises(dataclasses.FrozenInstanceError):
            action.name = "Run"


class TestDeposit:
    """Tests for Deposit entity."""

    def test_round_trip(self):
        """Test that a deposit survives to_json and from_json."""
        data = deposit_json()
        deposit = Deposit.from_json(data)

        assert deposit.to_json() == data
        assert Deposit.from_json(deposit.to_json()) == deposit

    def test_tokens_earned(self):
        """Test tokens are quantity times the frozen rate."""
        deposit = Deposit.from_json(deposit_json(depositQuantity=30, conversionRate=0.5))

        assert deposit.tokens_earned == 15
        assert deposit.token_delta == 15

    def test_naive_date_read_in_default_zone(self):
        """Test that dates without an offset are read as Chicago time."""
        deposit = Deposit.from_json(deposit_json(date="2024-07-01T12:00:00"))

        assert deposit.date.hour == 12
        assert deposit.to_json()["date"] == "2024-07-01T12:00:00.000-05:00"

    def test_offset_date_converted_to_default_zone(self):
        """Test that dates with an offset keep their instant."""
        deposit = Deposit.from_json(deposit_json(date="2024-01-01T18:00:00Z"))

        assert deposit.to_json()["date"] == "2024-01-01T12:00:00.000-06:00"

    def test_invalid_date_rejected(self):
        """Test that an unparseable date fails validation."""
        with pytest.raises(ValidationError, match="Invalid JSON date"):
            Deposit.from_json(deposit_json(date="not a date"))

    def test_from_action_freezes_rate(self, make_date):
        """Test that a deposit copies the action's rate and labels."""
        action = Action.from_json(action_json(depositsPer=15, tokensPer=0.25))
        deposit = Deposit.from_action(action, 60, make_date("2024-01-05T08:00:00"))

        assert deposit.id == ""
        assert deposit.vb_user_id == "vb-user-1"
        assert deposit.action_id == "action-1"
        assert deposit.action_name == "Walk"
        assert deposit.conversion_unit == "minutes"
        assert deposit.tokens_earned == pytest.approx(1)


class TestTaskDeposit:
    """Tests for Task and TaskDeposit entities."""

    def test_task_round_trip(self):
        """Test that a task survives to_json and from_json."""
        data = {
            "id": "task-1",
            "vbUserId": "vb-user-1",
            "name": "Make bed",
            "frequency": "weekly",
            "tokensPer": 2,
        }
        task = Task.from_json(data)

        assert task.frequency == Frequency.WEEKLY
        assert task.to_json() == data

    def test_task_deposit_round_trip(self):
        """Test that tokens earned are stored, not derived."""
        data = {
            "id": "td-1",
            "vbUserId": "vb-user-1",
            "date": "2024-01-01T09:30:00.000-06:00",
            "taskName": "Make bed",
            "taskId": "task-1",
            "conversionRate": 2,
            "frequency": "daily",
            "tokensEarned": 0,
        }
        task_deposit = TaskDeposit.from_json(data)

        assert task_deposit.token_delta == 0
        assert task_deposit.to_json() == data
        assert TaskDeposit.from_json(task_deposit.to_json()) == task_deposit

    def test_invalid_frequency_rejected(self):
        """Test that unknown frequencies fail validation."""
        with pytest.raises(ValidationError, match="Invalid JSON frequency"):
            Task.from_json(
                {
                    "id": "task-1",
                    "vbUserId": "vb-user-1",
                    "name": "Make bed",
                    "frequency": "hourly",
                    "tokensPer": 2,
                }
            )

    def test_from_task(self, make_task, make_date):
        """Test that a new task deposit earns the task's full reward."""
        task = make_task(tokens_per=3, frequency=Frequency.MONTHLY)
        task_deposit = TaskDeposit.from_task(task, make_date("2024-03-01"))

        assert task_deposit.tokens_earned == 3
        assert task_deposit.frequency == Frequency.MONTHLY
        assert task_deposit.with_tokens_earned(0).tokens_earned == 0


class TestPurchase:
    """Tests for PurchasePrice and Purchase entities."""

    def test_purchase_spends_tokens(self, make_date):
        """Test that a purchase has a negative token delta."""
        price = PurchasePrice(id="price-1", vb_user_id="vb-user-1", name="Dessert", price=3)
        purchase = Purchase.from_price(price, 3, make_date("2024-01-01"))

        assert purchase.purchased_name == "Dessert"
        assert purchase.purchase_price_id == "price-1"
        assert purchase.token_delta == -3

    def test_round_trip(self):
        """Test that a purchase survives to_json and from_json."""
        data = {
            "id": "purchase-1",
            "vbUserId": "vb-user-1",
            "purchasePriceId": "price-1",
            "purchasedName": "Dessert",
            "date": "2024-01-01T20:00:00.000-06:00",
            "purchasedQuantity": 3,
        }
        assert Purchase.from_json(data).to_json() == data


class TestDepositConversion:
    """Tests for DepositConversion entity."""

    def test_round_trip(self):
        """Test that a conversion survives to_json and from_json."""
        data = {
            "id": "conversion-1",
            "userId": "user-1",
            "name": "Reading",
            "rateName": "pages",
            "depositsPer": 10,
            "tokensPer": 1,
            "minDeposit": 1,
            "maxDeposit": 100,
        }
        assert DepositConversion.from_json(data).to_json() == data

    def test_max_deposit_required(self):
        """Test that maxDeposit cannot be omitted."""
        with pytest.raises(ValidationError, match="Invalid JSON maxDeposit"):
            DepositConversion.from_json(
                {
                    "id": "conversion-1",
                    "userId": "user-1",
                    "name": "Reading",
                    "rateName": "pages",
                    "depositsPer": 10,
                    "tokensPer": 1,
                    "minDeposit": 1,
                }
            )


class TestViceBankUser:
    """Tests for ViceBankUser entity."""

    def test_round_trip(self):
        """Test that a user survives to_json and from_json."""
        data = {"id": "vb-user-1", "userId": "user-1", "name": "Alice", "currentTokens": 4.5}
        user = ViceBankUser.from_json(data)

        assert user.to_json() == data

    def test_copy_with(self):
        """Test that copy_with leaves the source user unchanged."""
        user = ViceBankUser(id="vb-user-1", user_id="user-1", name="Alice", current_tokens=1)
        updated = user.copy_with(current_tokens=5)

        assert updated.current_tokens == 5
        assert user.current_tokens == 1
        assert updated.id == user.id


class TestActionBankEntities:
    """Tests for the action bank entities."""

    def test_user_round_trip(self):
        """Test that an action bank user has no owner field."""
        data = {"id": "ab-user-1", "name": "Alice", "currentTokens": 2}
        user = ActionBankUser.from_json(data)

        assert user.to_json() == data
        assert user.copy_with(current_tokens=5).current_tokens == 5

    def test_deposit_round_trip(self):
        """Test that a deposit keeps its conversion reference."""
        data = {
            "id": "deposit-1",
            "userId": "ab-user-1",
            "date": "2024-01-01T00:00:00.000-06:00",
            "depositQuantity": 4,
            "conversionRate": 0.5,
            "depositConversionId": "conversion-1",
            "depositConversionName": "Reading",
        }
        deposit = ActionBankDeposit.from_json(data)

        assert deposit.to_json() == data
        assert deposit.token_delta == 2

    def test_deposit_from_conversion(self, make_conversion, make_date):
        """Test that the conversion's rate is frozen into the deposit."""
        conversion = make_conversion(id="conversion-1", deposits_per=4, tokens_per=2)
        deposit = ActionBankDeposit.from_conversion(conversion, 8, make_date("2024-01-01"))

        assert deposit.conversion_rate == 0.5
        assert deposit.deposit_conversion_id == "conversion-1"
        assert deposit.user_id == "ab-user-1"
        assert deposit.tokens_earned == 4

    def test_purchase_validation(self):
        """Test that every failing purchase field is reported."""
        with pytest.raises(ValidationError, match="userId, purchasedQuantity"):
            ActionBankPurchase.from_json(
                {
                    "id": "purchase-1",
                    "purchasePriceId": "price-1",
                    "date": "2024-01-01T00:00:00.000-06:00",
                    "purchasedQuantity": float("nan"),
                }
            )
