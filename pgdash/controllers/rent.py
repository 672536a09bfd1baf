"""Rent ledger: records, the record form and the page's summary cards."""

from dataclasses import dataclass
from decimal import Decimal

from pgdash.controllers.resource_list import ResourceListController
from pgdash.models.rent import RentRecord, RentStatus
from pgdash.schemas.rent import RentForm


@dataclass(frozen=True)
class RentSummary:
    total_amount: Decimal
    collected_amount: Decimal
    pending_count: int
    overdue_count: int
    awaiting_count: int


class RentListController(ResourceListController[RentRecord]):
    resource_name = "rent record"
    search_fields = ("guest_name", "due_date", "month")
    form_schema = RentForm

    def summary(self) -> RentSummary:
        """Totals over every loaded record, regardless of the search term."""
        total = Decimal(0)
        collected = Decimal(0)
        counts = {status: 0 for status in RentStatus}
        for record in self.items:
            total += record.amount
            if record.is_paid:
                collected += record.amount
            counts[record.status] += 1
        return RentSummary(
            total_amount=total,
            collected_amount=collected,
            pending_count=counts[RentStatus.PENDING],
            overdue_count=counts[RentStatus.OVERDUE],
            awaiting_count=counts[RentStatus.AWAITING_PAYMENT],
        )
