"""Query options and results shared by the stores."""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGINATION = 10


def page_slice(items: Sequence[T], page: int, pagination: int) -> list[T]:
    """Return the ``page``-th block of ``pagination`` items (1-based).

    Pages past the end are empty rather than an error.
    """
    skip = pagination * (page - 1)
    end = pagination * page
    if skip < 0 or end <= 0:
        return []
    return list(items[skip:end])


@dataclass(frozen=True)
class OwnerPageOptions:
    """A page of items belonging to one owner.

    ``owner_id`` is ignored by stores whose items have no owner.
    """

    owner_id: Optional[str] = None
    page: int = DEFAULT_PAGE
    pagination: int = DEFAULT_PAGINATION


@dataclass(frozen=True)
class EntryQuery:
    """A page of ledger entries, optionally bounded by date and rule.

    Dates may be datetimes or ISO strings. Strings that do not parse are
    ignored, so the bound they describe is not applied.
    """

    owner_id: str
    page: int = DEFAULT_PAGE
    pagination: int = DEFAULT_PAGINATION
    start_date: Optional[Union[str, datetime]] = None
    end_date: Optional[Union[str, datetime]] = None
    rule_id: Optional[str] = None


@dataclass(frozen=True)
class LedgerChange(Generic[T]):
    """Result of a ledger mutation.

    ``entry`` is the stored entry for an add, the previous entry for an
    update and the removed entry for a delete. ``tokens_added`` is the
    signed change the mutation makes to the owner's balance.
    """

    entry: T
    tokens_added: float
