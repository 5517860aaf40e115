"""Ledger of every money movement behind a finance report.

Each priced time entry, each cost item and the sales commission become one
Transaction. The ledger total equals labor + external + commission.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from task_finance.calculators.entry_pricing import PricedEntry
from task_finance.calculators.money import format_currency
from task_finance.calculators.time_utils import format_decimal
from task_finance.models.cost_item import CostItem

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Neznámy"
LABOR_DESCRIPTION = "Interný náklad (Labor)"
EXTRA_DESCRIPTION = "Fakturované nad rámec budgetu"
EXTRA_QUANTITY_LABEL = "Time & Material"
EXTERNAL_LABEL = "Externý náklad"
COMMISSION_NAME = "Provízia (Sales)"
COMMISSION_DESCRIPTION = "Automatický výpočet"


class TransactionType(str, Enum):
    """Kind of ledger line."""

    LABOR = "labor"
    EXTRA = "extra"
    EXTERNAL = "external"
    COMMISSION = "commission"


@dataclass(frozen=True)
class Transaction:
    """One ledger line.

    Attributes:
        id: Source entry or cost id (synthetic for commission)
        type: Transaction type
        name: Who or what the line is for
        description: Short explanation
        quantity_label: Quantity column text
        amount_cents: Line amount
        date: Line date (commission uses the snapshot date)
        user_id: Entry author for time lines, None otherwise
    """

    id: str
    type: TransactionType
    name: str
    description: str
    quantity_label: str
    amount_cents: int
    date: dt.date
    user_id: Optional[str] = None


def ledger_total(transactions: Iterable[Transaction]) -> int:
    """Grand total of a ledger in cents."""
    return sum(t.amount_cents for t in transactions)


class TransactionListBuilder:
    """Builds the ledger from priced entries, cost items and commission.

    Attributes:
        currency_symbol: Symbol used in quantity labels

    Example:
        >>> builder = TransactionListBuilder()
        >>> ledger = builder.build_ledger(priced, costs, 12500, 100000, 25000,
        ...                               Decimal("10"), dt.date(2024, 3, 31))
        >>> ledger_total(ledger) == labor + external + 12500
        True
    """

    def __init__(self, currency_symbol: str = "€"):
        self.currency_symbol = currency_symbol

    def entry_transaction(self, priced: PricedEntry) -> Transaction:
        """Ledger line of one priced time entry."""
        name = priced.entry.user_name or UNKNOWN_USER_NAME
        if priced.is_extra:
            return Transaction(
                id=priced.id,
                type=TransactionType.EXTRA,
                name=name,
                description=EXTRA_DESCRIPTION,
                quantity_label=EXTRA_QUANTITY_LABEL,
                amount_cents=priced.amount_cents,
                date=priced.date,
                user_id=priced.user_id,
            )

        rate_label = format_currency(priced.rate_cents, self.currency_symbol)
        return Transaction(
            id=priced.id,
            type=TransactionType.LABOR,
            name=name,
            description=LABOR_DESCRIPTION,
            quantity_label=f"{format_decimal(priced.hours)} h × {rate_label}",
            amount_cents=priced.amount_cents,
            date=priced.date,
            user_id=priced.user_id,
        )

    def cost_transaction(self, cost: CostItem) -> Transaction:
        """Ledger line of one cost item."""
        return Transaction(
            id=cost.id,
            type=TransactionType.EXTERNAL,
            name=cost.name,
            description=cost.description or EXTERNAL_LABEL,
            quantity_label=EXTERNAL_LABEL,
            amount_cents=cost.amount_cents,
            date=cost.date,
        )

    def commission_transaction(
        self,
        commission_cents: int,
        budget_cents: int,
        extra_cents: int,
        commission_percent: Decimal,
        as_of: dt.date,
        source_id: str = "commission",
    ) -> Transaction:
        """Synthetic commission line.

        Args:
            commission_cents: Commission amount
            budget_cents: Budget part of the commission base
            extra_cents: Extra part of the commission base
            commission_percent: Percentage applied
            as_of: Date the line is booked on
            source_id: Task or project id the commission belongs to

        Returns:
            Transaction of type COMMISSION
        """
        base_label = format_currency(budget_cents + extra_cents, self.currency_symbol)
        return Transaction(
            id=f"commission-{source_id}",
            type=TransactionType.COMMISSION,
            name=COMMISSION_NAME,
            description=COMMISSION_DESCRIPTION,
            quantity_label=f"{format_decimal(commission_percent)}% z {base_label}",
            amount_cents=commission_cents,
            date=as_of,
        )

    def build_ledger(
        self,
        entries: Sequence[PricedEntry],
        costs: Sequence[CostItem],
        commission_cents: int,
        budget_cents: int,
        extra_cents: int,
        commission_percent: Decimal,
        as_of: dt.date,
        source_id: str = "commission",
    ) -> List[Transaction]:
        """Build the ledger of a task.

        Args:
            entries: Priced time entries
            costs: Cost items
            commission_cents: Commission amount (no line when 0)
            budget_cents: Fixed budget
            extra_cents: Overrun above the budget
            commission_percent: Percentage used for the commission label
            as_of: Date of the commission line
            source_id: Id the commission line is derived from

        Returns:
            Transactions sorted by date, newest first; lines on the same date
            keep entry, cost, commission order
        """
        transactions = [self.entry_transaction(p) for p in entries]
        transactions.extend(self.cost_transaction(c) for c in costs)
        if commission_cents > 0:
            transactions.append(
                self.commission_transaction(
                    commission_cents,
                    budget_cents,
                    extra_cents,
                    commission_percent,
                    as_of,
                    source_id=source_id,
                )
            )
        return self.sort_ledger(transactions)

    @staticmethod
    def sort_ledger(transactions: Iterable[Transaction]) -> List[Transaction]:
        """Sort by date descending, keeping the input order within a day."""
        ordered = sorted(transactions, key=lambda t: t.date, reverse=True)
        logger.debug(f"Built ledger with {len(ordered)} transactions")
        return ordered
