"""Tests for ViceBankService balance reconciliation."""

from dataclasses import replace

import pytest

from vicebank.domain.entities import PurchasePrice
from vicebank.domain.errors import NotFoundError, ValidationError
from vicebank.domain.frequency import Frequency


class TestUsers:
    """Tests for vice bank user management."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, vice_bank_service):
        """Test creating users and listing them per account."""
        alice = await vice_bank_service.create_user("user-1", "Alice")
        await vice_bank_service.create_user("user-2", "Bob", current_tokens=3)

        assert alice.current_tokens == 0
        assert await vice_bank_service.list_users("user-1") == [alice]

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, vice_bank_service):
        """Test that a blank name is rejected."""
        with pytest.raises(ValidationError, match="Name cannot be empty"):
            await vice_bank_service.create_user("user-1", "   ")

    @pytest.mark.asyncio
    async def test_missing_user(self, vice_bank_service):
        """Test that unknown users raise NotFoundError."""
        with pytest.raises(NotFoundError, match="User with ID nobody not found"):
            await vice_bank_service.get_user("nobody")


class TestDeposits:
    """Tests for deposits and the balance they move."""

    @pytest.mark.asyncio
    async def test_add_update_delete_moves_balance(
        self, vice_bank_service, vb_user, make_action, make_date
    ):
        """Test that every deposit mutation is applied to the balance."""
        action = await vice_bank_service.add_action(
            make_action(vb_user_id=vb_user.id, deposits_per=2, tokens_per=1)
        )
        deposit = await vice_bank_service.deposit_for_action(
            action.id, 10, make_date("2024-01-01T08:00:00")
        )

        added = await vice_bank_service.add_deposit(deposit)
        assert added.tokens_added == 5
        assert added.user.current_tokens == 5

        updated = await vice_bank_service.update_deposit(
            replace(added.entry, deposit_quantity=4)
        )
        assert updated.tokens_added == -3
        assert updated.entry == added.entry
        assert updated.user.current_tokens == 2

        deleted = await vice_bank_service.delete_deposit(added.entry.id)
        assert deleted.tokens_added == -2
        assert (await vice_bank_service.get_user(vb_user.id)).current_tokens == 0

    @pytest.mark.asyncio
    async def test_rate_frozen_at_deposit_time(
        self, vice_bank_service, vb_user, make_action, make_date
    ):
        """Test that changing an action does not change earlier deposits."""
        action = await vice_bank_service.add_action(
            make_action(vb_user_id=vb_user.id, tokens_per=1)
        )
        deposit = await vice_bank_service.deposit_for_action(
            action.id, 3, make_date("2024-01-01")
        )
        added = await vice_bank_service.add_deposit(deposit)

        await vice_bank_service.update_action(replace(action, tokens_per=10))

        deposits = await vice_bank_service.list_deposits(vb_user.id)
        assert deposits == [added.entry]
        assert deposits[0].tokens_earned == 3

    @pytest.mark.asyncio
    async def test_deposit_limits(self, vice_bank_service, vb_user, make_action, make_date):
        """Test that quantities outside the action's limits are rejected."""
        action = await vice_bank_service.add_action(
            make_action(vb_user_id=vb_user.id, min_deposit=15, max_deposit=60)
        )

        with pytest.raises(ValidationError, match="at least 15"):
            await vice_bank_service.deposit_for_action(action.id, 10, make_date("2024-01-01"))
        with pytest.raises(ValidationError, match="at most 60"):
            await vice_bank_service.deposit_for_action(action.id, 90, make_date("2024-01-01"))

    @pytest.mark.asyncio
    async def test_unknown_user_stores_nothing(self, vice_bank_service, make_deposit):
        """Test that a deposit for a missing user is rejected before storing."""
        with pytest.raises(NotFoundError, match="ghost"):
            await vice_bank_service.add_deposit(make_deposit(id="", vb_user_id="ghost"))

        assert vice_bank_service.stores.actions.entries == {}

    @pytest.mark.asyncio
    async def test_unknown_action(self, vice_bank_service, make_date):
        """Test that deposits against a missing action are rejected."""
        with pytest.raises(NotFoundError, match="Action with ID nope not found"):
            await vice_bank_service.deposit_for_action("nope", 1, make_date("2024-01-01"))

    @pytest.mark.asyncio
    async def test_moving_deposit_between_users(
        self, vice_bank_service, vb_user, make_deposit
    ):
        """Test that reassigning a deposit moves its tokens."""
        other = await vice_bank_service.create_user("user-1", "Bob")
        added = await vice_bank_service.add_deposit(
            make_deposit(id="", vb_user_id=vb_user.id, deposit_quantity=4)
        )

        moved = await vice_bank_service.update_deposit(
            replace(added.entry, vb_user_id=other.id)
        )

        assert moved.user.id == other.id
        assert moved.user.current_tokens == 4
        assert (await vice_bank_service.get_user(vb_user.id)).current_tokens == 0

    @pytest.mark.asyncio
    async def test_list_deposits_filters(self, vice_bank_service, vb_user, make_deposit, make_date):
        """Test that date and action filters reach the store."""
        for day, action_id in [("01", "walk"), ("12", "walk"), ("15", "read")]:
            await vice_bank_service.add_deposit(
                make_deposit(
                    id="",
                    vb_user_id=vb_user.id,
                    action_id=action_id,
                    date=make_date(f"2024-01-{day}"),
                )
            )

        recent = await vice_bank_service.list_deposits(vb_user.id, start_date="2024-01-08")
        walks = await vice_bank_service.list_deposits(vb_user.id, action_id="walk")

        assert [d.date.day for d in recent] == [12, 15]
        assert [d.date.day for d in walks] == [1, 12]


class TestTaskDeposits:
    """Tests for recurring task credit."""

    @pytest.mark.asyncio
    async def test_once_per_period(self, vice_bank_service, vb_user, make_task, make_date):
        """Test that only the first completion in a period earns tokens."""
        task = await vice_bank_service.add_task(
            make_task(vb_user_id=vb_user.id, frequency=Frequency.DAILY, tokens_per=2)
        )

        first = await vice_bank_service.add_task_deposit(
            await vice_bank_service.deposit_for_task(task.id, make_date("2024-01-10T08:00:00"))
        )
        second = await vice_bank_service.add_task_deposit(
            await vice_bank_service.deposit_for_task(task.id, make_date("2024-01-10T20:00:00"))
        )
        next_day = await vice_bank_service.add_task_deposit(
            await vice_bank_service.deposit_for_task(task.id, make_date("2024-01-11T08:00:00"))
        )

        assert first.tokens_added == 2
        assert second.tokens_added == 0
        assert second.entry.tokens_earned == 0
        assert next_day.tokens_added == 2
        assert next_day.user.current_tokens == 4
        assert len(await vice_bank_service.list_task_deposits(vb_user.id)) == 3

    @pytest.mark.asyncio
    async def test_weekly_task(self, vice_bank_service, vb_user, make_task, make_date):
        """Test that weekly tasks credit once per Monday-to-Sunday week."""
        task = await vice_bank_service.add_task(
            make_task(vb_user_id=vb_user.id, frequency=Frequency.WEEKLY, tokens_per=5)
        )

        results = []
        for date in ["2024-01-08", "2024-01-14", "2024-01-15"]:
            task_deposit = await vice_bank_service.deposit_for_task(task.id, make_date(date))
            results.append(await vice_bank_service.add_task_deposit(task_deposit))

        assert [r.tokens_added for r in results] == [5, 0, 5]

    @pytest.mark.asyncio
    async def test_delete_task_deposit_refunds(
        self, vice_bank_service, vb_user, make_task, make_date
    ):
        """Test that deleting a completion removes its tokens."""
        task = await vice_bank_service.add_task(make_task(vb_user_id=vb_user.id))
        added = await vice_bank_service.add_task_deposit(
            await vice_bank_service.deposit_for_task(task.id, make_date("2024-01-10"))
        )

        deleted = await vice_bank_service.delete_task_deposit(added.entry.id)

        assert deleted.tokens_added == -2
        assert deleted.user.current_tokens == 0


class TestPurchases:
    """Tests for spending tokens."""

    @pytest.mark.asyncio
    async def test_purchase_and_refund(self, vice_bank_service, make_date):
        """Test that a purchase deducts tokens and deleting it refunds them."""
        buyer = await vice_bank_service.create_user("user-1", "Alice", current_tokens=10)
        price = await vice_bank_service.add_purchase_price(
            PurchasePrice(id="", vb_user_id=buyer.id, name="Dessert", price=3)
        )

        purchase = await vice_bank_service.purchase_for_price(
            price.id, make_date("2024-01-01")
        )
        bought = await vice_bank_service.add_purchase(purchase)

        assert purchase.purchased_quantity == 3
        assert bought.tokens_added == -3
        assert bought.user.current_tokens == 7

        refunded = await vice_bank_service.delete_purchase(bought.entry.id)
        assert refunded.tokens_added == 3
        assert refunded.user.current_tokens == 10

    @pytest.mark.asyncio
    async def test_not_enough_tokens(self, vice_bank_service, make_date):
        """Test that a purchase may not overdraw the balance."""
        buyer = await vice_bank_service.create_user("user-1", "Alice", current_tokens=2)
        price = await vice_bank_service.add_purchase_price(
            PurchasePrice(id="", vb_user_id=buyer.id, name="Dessert", price=3)
        )
        purchase = await vice_bank_service.purchase_for_price(
            price.id, make_date("2024-01-01")
        )

        with pytest.raises(ValidationError, match="Not enough tokens"):
            await vice_bank_service.add_purchase(purchase)

        assert (await vice_bank_service.get_user(buyer.id)).current_tokens == 2
        assert await vice_bank_service.list_purchases(buyer.id) == []

    @pytest.mark.asyncio
    async def test_exact_balance_allowed(self, vice_bank_service, make_date):
        """Test that spending the whole balance is allowed."""
        buyer = await vice_bank_service.create_user("user-1", "Alice", current_tokens=3)
        price = await vice_bank_service.add_purchase_price(
            PurchasePrice(id="", vb_user_id=buyer.id, name="Dessert", price=3)
        )

        bought = await vice_bank_service.add_purchase(
            await vice_bank_service.purchase_for_price(price.id, make_date("2024-01-01"))
        )
        assert bought.user.current_tokens == 0
