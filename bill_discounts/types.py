"""Enumerated tags shared by bills, users and discounts."""

from enum import Enum
from typing import Optional


class _Tag(str, Enum):
    """String enum that can be parsed by value or member name."""

    @classmethod
    def parse(cls, value) -> Optional["_Tag"]:
        """Convert a raw tag into a member of this enum.

        Args:
            value: A member, its value, its name (case-insensitive) or None.

        Returns:
            The matching member, or None when value is None.

        Raises:
            ValueError: If the tag is not a member of this enum.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise ValueError(f"Unknown {cls.__name__}: {value!r}")


class CategoryType(_Tag):
    """Bill categories a discount can exclude."""
    GROCERIES = "groceries"
    CLOTHING = "clothing"
    ELECTRONICS = "electronics"
    HOUSEHOLD = "household"
    OTHER = "other"


class UserType(_Tag):
    """Kinds of users a discount can target."""
    EMPLOYEE = "employee"
    AFFILIATE = "affiliate"
    PREMIUM = "premium"
    REGULAR = "regular"


class DiscountType(_Tag):
    """How a discount value is interpreted."""
    PERCENTAGE = "percentage"
    AMOUNT = "amount"
