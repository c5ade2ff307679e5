"""Data models for bills and the users they belong to.

This module defines the user, the discountable contract and the
bill that applies its attached discounts to produce a payable net.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from .discounts import Discount, to_decimal
from .types import CategoryType, UserType

logger = logging.getLogger(__name__)


@dataclass
class User:
    """A user of the retail site.

    Attributes:
        user_type: The kind of user (employee, affiliate, ...)
    """
    user_type: Optional[UserType]

    def __post_init__(self):
        self.user_type = UserType.parse(self.user_type)


class Discountable(Protocol):
    """Anything discounts can be applied to."""
    user: Optional[User]
    category: Optional[CategoryType]
    net: Decimal
    net_payable: Optional[Decimal]


class Bill:
    """Represents a user bill on the retail site.

    The bill carries two ordered lists of discounts. Mutually exclusive
    discounts are tried in order and only the first that applies is
    taken off. Always applicable discounts are all taken off, in order.

    Attributes:
        user: The user the bill belongs to
        net: The bill's net before discounts
        category: Optional category of the bill (groceries, clothing, ...)
        net_payable: The net after discounts, None until applied
        always_applicable_discounts: Discounts that are always applied
        mutually_exclusive_discounts: Discounts of which at most one is applied
        applied_discounts: (discount, amount) pairs from the last application
    """

    def __init__(
        self,
        user: User,
        net: Decimal,
        category: Optional[CategoryType] = None
    ):
        if net is None:
            raise ValueError("net is required")
        if user is None:
            raise ValueError("user is required")

        self.user = user
        self.net = to_decimal(net, 'net')
        self.category = CategoryType.parse(category)
        self.net_payable: Optional[Decimal] = None
        self.always_applicable_discounts: list[Discount] = []
        self.mutually_exclusive_discounts: list[Discount] = []
        self.applied_discounts: list[tuple[Discount, Decimal]] = []

    def apply_discounts(self) -> Decimal:
        """Apply the attached discounts and return the payable net.

        The payable net is recomputed from net on every call. Mutually
        exclusive discounts are applied first, then every always
        applicable discount. The running payable net is kept on the bill
        while discounts are evaluated.

        Returns:
            The net after the discounts are applied.

        Raises:
            ValueError: If net is missing or a discount rejects the bill.
            Any error raised by a discount propagates and leaves no
            partial result on the bill.
        """
        if self.net is None:
            raise ValueError("net is required")

        self.net_payable = self.net
        self.applied_discounts = []
        try:
            for discount in self.mutually_exclusive_discounts or []:
                amount = discount.calculate(self)
                if amount is not None:
                    self._take_off(discount, amount)
                    break

            for discount in self.always_applicable_discounts or []:
                amount = discount.calculate(self)
                if amount is not None:
                    self._take_off(discount, amount)
        except Exception:
            self.net_payable = None
            self.applied_discounts = []
            raise

        logger.debug(
            "Applied %d discount(s): net %s -> payable %s",
            len(self.applied_discounts), self.net, self.net_payable
        )
        return self.net_payable

    def _take_off(self, discount: Discount, amount: Decimal) -> None:
        self.net_payable = self.net_payable - amount
        self.applied_discounts.append((discount, amount))

    def total_discount(self) -> Decimal:
        """Get the total amount taken off by the last application.

        Raises:
            ValueError: If discounts have not been applied yet.
        """
        if self.net_payable is None:
            raise ValueError("discounts have not been applied")
        return self.net - self.net_payable
