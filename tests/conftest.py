"""Shared pytest fixtures for vicebank tests."""

import pytest
import pytest_asyncio

from vicebank.domain.action_bank import ActionBankService
from vicebank.domain.entities import Action, Deposit, DepositConversion, Task, ViceBankUser
from vicebank.domain.frequency import Frequency
from vicebank.domain.vice_bank import ViceBankService
from vicebank.storage.factories import (
    create_in_memory_action_bank_stores,
    create_in_memory_vice_bank_stores,
)
from vicebank.utils.date_parser import parse_zoned_datetime


@pytest.fixture
def make_date():
    """Parse an ISO string into a zoned datetime."""
    return parse_zoned_datetime


@pytest.fixture
def make_action():
    """Build an unsaved Action with overridable fields."""

    def _make(**overrides):
        fields = {
            "id": "action-1",
            "vb_user_id": "vb-user-1",
            "name": "Walk",
            "conversion_unit": "minutes",
            "deposits_per": 1,
            "tokens_per": 1,
            "min_deposit": 0,
        }
        fields.update(overrides)
        return Action(**fields)

    return _make


@pytest.fixture
def make_deposit():
    """Build a Deposit with overridable fields."""

    def _make(**overrides):
        fields = {
            "id": "deposit-1",
            "vb_user_id": "vb-user-1",
            "date": parse_zoned_datetime("2024-01-01T12:00:00"),
            "deposit_quantity": 1,
            "conversion_rate": 1,
            "action_id": "action-1",
            "action_name": "Walk",
            "conversion_unit": "minutes",
        }
        fields.update(overrides)
        return Deposit(**fields)

    return _make


@pytest.fixture
def make_task():
    """Build an unsaved Task with overridable fields."""

    def _make(**overrides):
        fields = {
            "id": "task-1",
            "vb_user_id": "vb-user-1",
            "name": "Make bed",
            "frequency": Frequency.DAILY,
            "tokens_per": 2,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def memory_stores():
    """Create empty in-memory vice bank stores."""
    return create_in_memory_vice_bank_stores()


@pytest.fixture
def vice_bank_service(memory_stores):
    """Create a ViceBankService over in-memory stores."""
    return ViceBankService(memory_stores)


@pytest_asyncio.fixture
async def vb_user(vice_bank_service) -> ViceBankUser:
    """Create a vice bank user with an empty balance."""
    return await vice_bank_service.create_user("user-1", "Alice")


@pytest.fixture
def make_conversion():
    """Build an unsaved DepositConversion with overridable fields."""

    def _make(**overrides):
        fields = {
            "id": "",
            "user_id": "ab-user-1",
            "name": "Reading",
            "rate_name": "pages",
            "deposits_per": 10,
            "tokens_per": 1,
            "min_deposit": 1,
            "max_deposit": 100,
        }
        fields.update(overrides)
        return DepositConversion(**fields)

    return _make


@pytest.fixture
def action_bank_service():
    """Create an ActionBankService over in-memory stores."""
    return ActionBankService(create_in_memory_action_bank_stores())


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
