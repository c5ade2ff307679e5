"""Discount summarization module.

This module reports how the discounts attached to a bill were
applied and what is left to pay.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .models import Bill


@dataclass
class DiscountSummary:
    """Summary of the discounts applied to a bill.

    Attributes:
        net: The bill's net before discounts
        net_payable: The bill's net after discounts
        total_discount: Total amount taken off
        category: The bill's category, if any
        user_type: The type of the bill's user
        applied_discounts: Details of each applied discount, in order
    """
    net: Decimal
    net_payable: Decimal
    total_discount: Decimal = Decimal('0')
    category: Optional[str] = None
    user_type: Optional[str] = None
    applied_discounts: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert summary to dictionary format."""
        return {
            'net': str(self.net),
            'net_payable': str(self.net_payable),
            'total_discount': str(self.total_discount),
            'category': self.category,
            'user_type': self.user_type,
            'applied_discounts': self.applied_discounts
        }


class DiscountSummarizer:
    """Summarizes the outcome of applying discounts to bills."""

    def summarize(self, bill: Bill) -> DiscountSummary:
        """Generate a summary of a bill's discounts.

        Discounts are applied first if the bill has not been
        discounted yet.

        Args:
            bill: The Bill object to summarize.

        Returns:
            A DiscountSummary for the bill.
        """
        if bill.net_payable is None:
            bill.apply_discounts()

        return DiscountSummary(
            net=bill.net,
            net_payable=bill.net_payable,
            total_discount=bill.total_discount(),
            category=bill.category.value if bill.category else None,
            user_type=(
                bill.user.user_type.value
                if bill.user and bill.user.user_type else None
            ),
            applied_discounts=self._extract_applied_details(bill)
        )

    def summarize_multiple(self, bills: list[Bill]) -> dict:
        """Summarize multiple bills and calculate combined totals.

        Returns:
            Dictionary with individual summaries and combined totals.
        """
        summaries = [self.summarize(bill) for bill in bills]

        combined_net = sum((s.net for s in summaries), Decimal('0'))
        combined_payable = sum((s.net_payable for s in summaries), Decimal('0'))

        return {
            'bill_count': len(bills),
            'combined_net': str(combined_net),
            'combined_net_payable': str(combined_payable),
            'combined_discount': str(combined_net - combined_payable),
            'individual_summaries': [s.to_dict() for s in summaries]
        }

    @staticmethod
    def _extract_applied_details(bill: Bill) -> list[dict]:
        details = []
        for i, (discount, amount) in enumerate(bill.applied_discounts):
            discount_type = getattr(discount, 'discount_type', None)
            value = getattr(discount, 'discount_value', None)
            details.append({
                'index': i + 1,
                'kind': type(discount).__name__,
                'discount_type': discount_type.value if discount_type else None,
                'discount_value': None if value is None else str(value),
                'amount': str(amount)
            })
        return details

    def get_formatted_summary(self, bill: Bill) -> str:
        """Generate a formatted text summary of the bill's discounts."""
        summary = self.summarize(bill)

        lines = [
            "Discount Summary",
            f"{'=' * 50}",
            f"Category: {summary.category or '-'}",
            f"User type: {summary.user_type or '-'}",
            f"Net: ${summary.net}",
            "",
            "Applied Discounts:",
            "-" * 50
        ]

        if not summary.applied_discounts:
            lines.append("  (none)")
        for d in summary.applied_discounts:
            lines.append(
                f"  {d['index']}. {d['kind']} ({d['discount_type']} "
                f"{d['discount_value']}): -${d['amount']}"
            )

        lines.append("-" * 50)
        lines.append(f"Total Discount: ${summary.total_discount}")
        lines.append(f"Net Payable: ${summary.net_payable}")

        return "\n".join(lines)
