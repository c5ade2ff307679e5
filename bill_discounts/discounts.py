"""Discount rules that can be attached to a bill.

A discount decides whether it applies to a discountable entity and,
when it does, how much it takes off. Variants share the category
exclusion check and the amount calculation through the helper
functions below rather than through a common base class.

Percentage amounts are rounded half-up to two decimal places.
Fixed amounts are returned as given and are never clamped to the
amount still payable on the bill.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Iterable, Optional, Protocol

from .types import CategoryType, DiscountType, UserType

if TYPE_CHECKING:
    from .models import Discountable


CENT = Decimal('0.01')
HUNDRED = Decimal('100')


def to_decimal(value, name: str) -> Decimal:
    """Coerce a numeric value to Decimal, raising ValueError if it is not one."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{name} is not a valid amount: {value!r}")


class Discount(Protocol):
    """Capability every discount rule implements."""

    def is_applicable(self, discountable: "Discountable") -> bool:
        ...

    def calculate(self, discountable: "Discountable") -> Optional[Decimal]:
        """Return the amount to take off, or None when the discount does not apply."""
        ...


def is_category_applicable(
    excluded_categories: Iterable[CategoryType],
    category: Optional[CategoryType]
) -> bool:
    """Check whether a category is not excluded.

    An unset category is never excluded.
    """
    return category not in excluded_categories


def discount_amount(
    discount_type: DiscountType,
    discount_value: Decimal,
    net: Decimal
) -> Decimal:
    """Calculate the reduction a discount value represents for a net.

    Args:
        discount_type: PERCENTAGE or AMOUNT.
        discount_value: The percentage or the fixed amount.
        net: The bill's net before discounts.

    Returns:
        The reduction, rounded to cents for percentages.
    """
    if discount_type is DiscountType.AMOUNT:
        return discount_value
    return (net * discount_value / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def _init_common(discount) -> None:
    """Validate and normalise the fields every variant carries."""
    discount_type = DiscountType.parse(discount.discount_type) or DiscountType.PERCENTAGE
    if discount.discount_value is None:
        raise ValueError("discount_value is required")
    excluded = discount.excluded_categories or ()
    if isinstance(excluded, (str, bytes)) or not hasattr(excluded, '__iter__'):
        raise ValueError("excluded_categories must be a collection")

    object.__setattr__(discount, 'discount_type', discount_type)
    object.__setattr__(
        discount, 'discount_value', to_decimal(discount.discount_value, 'discount_value')
    )
    object.__setattr__(
        discount,
        'excluded_categories',
        frozenset(CategoryType.parse(c) for c in excluded)
    )


def _require_discountable(discountable: "Discountable") -> None:
    if discountable is None:
        raise ValueError("discountable is missing or invalid")


@dataclass(frozen=True)
class GenericDiscount:
    """A discount that applies to any bill whose category is not excluded.

    Attributes:
        discount_type: PERCENTAGE (default) or AMOUNT
        discount_value: The percentage or the fixed amount
        excluded_categories: Categories this discount never applies to
    """
    discount_type: Optional[DiscountType] = DiscountType.PERCENTAGE
    discount_value: Optional[Decimal] = None
    excluded_categories: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        _init_common(self)

    def is_applicable(self, discountable: "Discountable") -> bool:
        _require_discountable(discountable)
        return is_category_applicable(self.excluded_categories, discountable.category)

    def calculate(self, discountable: "Discountable") -> Optional[Decimal]:
        if not self.is_applicable(discountable):
            return None
        return discount_amount(self.discount_type, self.discount_value, discountable.net)


@dataclass(frozen=True)
class UserTypeDiscount:
    """A discount based on the type of the user a bill belongs to.

    Attributes:
        discount_type: PERCENTAGE (default) or AMOUNT
        discount_value: The percentage or the fixed amount
        excluded_categories: Categories this discount never applies to
        user_type: The user type this discount targets
    """
    discount_type: Optional[DiscountType] = DiscountType.PERCENTAGE
    discount_value: Optional[Decimal] = None
    excluded_categories: frozenset = field(default_factory=frozenset)
    user_type: Optional[UserType] = None

    def __post_init__(self):
        _init_common(self)
        if self.user_type is None:
            raise ValueError("user_type is required")
        object.__setattr__(self, 'user_type', UserType.parse(self.user_type))

    def is_applicable(self, discountable: "Discountable") -> bool:
        """Check the category exclusions, then match the user type.

        Raises:
            ValueError: If the discountable, its user or the user's type is missing.
        """
        if (discountable is None or discountable.user is None
                or discountable.user.user_type is None):
            raise ValueError("discountable is missing or invalid")
        if self.user_type is None:
            raise ValueError("user_type is required")

        if not is_category_applicable(self.excluded_categories, discountable.category):
            return False
        return self.user_type == discountable.user.user_type

    def calculate(self, discountable: "Discountable") -> Optional[Decimal]:
        if not self.is_applicable(discountable):
            return None
        return discount_amount(self.discount_type, self.discount_value, discountable.net)
