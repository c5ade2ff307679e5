"""Tests for discount rules."""

from decimal import Decimal

import pytest

from bill_discounts.discounts import (
    GenericDiscount,
    UserTypeDiscount,
    discount_amount,
    is_category_applicable,
)
from bill_discounts.models import Bill, User
from bill_discounts.types import CategoryType, DiscountType, UserType


@pytest.fixture
def premium_bill():
    """A groceries bill for a premium user."""
    return Bill(User(UserType.PREMIUM), Decimal('100.00'), CategoryType.GROCERIES)


class TestHelpers:
    """Tests for the shared discount helpers."""

    def test_category_not_excluded(self):
        """Test a category missing from the exclusions is applicable."""
        assert is_category_applicable(
            frozenset({CategoryType.CLOTHING}), CategoryType.GROCERIES
        ) is True

    def test_category_excluded(self):
        """Test an excluded category is not applicable."""
        assert is_category_applicable(
            frozenset({CategoryType.GROCERIES}), CategoryType.GROCERIES
        ) is False

    def test_unset_category_never_excluded(self):
        """Test an unset category is always applicable."""
        assert is_category_applicable(frozenset(CategoryType), None) is True

    def test_percentage_amount(self):
        """Test percentage discounts are a share of net."""
        assert discount_amount(
            DiscountType.PERCENTAGE, Decimal('10'), Decimal('100.00')
        ) == Decimal('10.00')

    def test_percentage_rounds_half_up(self):
        """Test percentage discounts are rounded half up to cents."""
        # 12.5% of 0.20 = 0.025
        assert discount_amount(
            DiscountType.PERCENTAGE, Decimal('12.5'), Decimal('0.20')
        ) == Decimal('0.03')

    def test_fixed_amount_is_not_clamped(self):
        """Test fixed amounts may exceed the net."""
        assert discount_amount(
            DiscountType.AMOUNT, Decimal('150'), Decimal('100')
        ) == Decimal('150')


class TestGenericDiscount:
    """Tests for GenericDiscount."""

    def test_defaults_to_percentage(self):
        """Test the discount type defaults to percentage."""
        discount = GenericDiscount(discount_type=None, discount_value=5)

        assert discount.discount_type is DiscountType.PERCENTAGE
        assert discount.discount_value == Decimal('5')
        assert discount.excluded_categories == frozenset()

    def test_missing_value_raises_error(self):
        """Test that a missing discount value raises ValueError."""
        with pytest.raises(ValueError, match="discount_value is required"):
            GenericDiscount(DiscountType.AMOUNT, None)

    def test_is_immutable(self):
        """Test discounts cannot be modified after construction."""
        discount = GenericDiscount(DiscountType.AMOUNT, Decimal('5'))

        with pytest.raises(AttributeError):
            discount.discount_value = Decimal('50')

    def test_calculate_fixed_amount(self, premium_bill):
        """Test a fixed amount discount returns its value."""
        discount = GenericDiscount(DiscountType.AMOUNT, Decimal('5.00'))

        assert discount.calculate(premium_bill) == Decimal('5.00')

    def test_excluded_category_returns_none(self, premium_bill):
        """Test an excluded category yields no discount."""
        discount = GenericDiscount(
            DiscountType.AMOUNT, Decimal('5'), {CategoryType.GROCERIES}
        )

        assert discount.is_applicable(premium_bill) is False
        assert discount.calculate(premium_bill) is None

    def test_zero_amount_is_not_none(self, premium_bill):
        """Test an applicable zero discount is distinct from no discount."""
        discount = GenericDiscount(DiscountType.AMOUNT, Decimal('0'))

        assert discount.calculate(premium_bill) == Decimal('0')
        assert discount.calculate(premium_bill) is not None

    def test_missing_discountable_raises_error(self):
        """Test that a missing discountable raises ValueError."""
        discount = GenericDiscount(DiscountType.AMOUNT, Decimal('5'))

        with pytest.raises(ValueError):
            discount.is_applicable(None)


class TestUserTypeDiscount:
    """Tests for UserTypeDiscount."""

    def test_matching_user_type(self, premium_bill):
        """Test the discount applies to the matching user type."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE, Decimal('10'), set(), UserType.PREMIUM
        )

        assert discount.is_applicable(premium_bill) is True
        assert discount.calculate(premium_bill) == Decimal('10.00')

    def test_other_user_type(self, premium_bill):
        """Test the discount does not apply to other user types."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE, Decimal('30'), set(), UserType.EMPLOYEE
        )

        assert discount.is_applicable(premium_bill) is False
        assert discount.calculate(premium_bill) is None

    def test_excluded_category_wins_over_user_type(self, premium_bill):
        """Test an excluded category blocks a matching user type."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE,
            Decimal('10'),
            {CategoryType.GROCERIES},
            UserType.PREMIUM
        )

        assert discount.is_applicable(premium_bill) is False
        assert discount.calculate(premium_bill) is None

    def test_user_type_parsed_from_string(self):
        """Test the user type can be given as a string."""
        discount = UserTypeDiscount(DiscountType.AMOUNT, 5, [], 'premium')

        assert discount.user_type is UserType.PREMIUM

    def test_missing_user_type_raises_error(self):
        """Test that a missing user type raises ValueError."""
        with pytest.raises(ValueError, match="user_type is required"):
            UserTypeDiscount(DiscountType.PERCENTAGE, Decimal('10'), set(), None)

    def test_discountable_without_user_raises_error(self, premium_bill):
        """Test that a discountable without a user raises ValueError."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE, Decimal('10'), set(), UserType.PREMIUM
        )
        premium_bill.user = None

        with pytest.raises(ValueError, match="discountable is missing or invalid"):
            discount.is_applicable(premium_bill)

    def test_user_without_type_raises_error(self, premium_bill):
        """Test that a user without a type raises ValueError."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE, Decimal('10'), set(), UserType.PREMIUM
        )
        premium_bill.user = User(None)

        with pytest.raises(ValueError):
            discount.calculate(premium_bill)

    def test_missing_discountable_raises_error(self):
        """Test that a missing discountable raises ValueError."""
        discount = UserTypeDiscount(
            DiscountType.PERCENTAGE, Decimal('10'), set(), UserType.PREMIUM
        )

        with pytest.raises(ValueError):
            discount.is_applicable(None)


class TestDiscountValidation:
    """Tests for malformed discount fields."""

    def test_invalid_value_raises_error(self):
        """Test that a non-numeric discount value raises ValueError."""
        with pytest.raises(ValueError, match="discount_value is not a valid amount"):
            GenericDiscount(DiscountType.AMOUNT, "abc")

    def test_bare_string_exclusions_raise_error(self):
        """Test a single category string is not split into characters."""
        with pytest.raises(ValueError, match="excluded_categories must be a collection"):
            GenericDiscount(DiscountType.AMOUNT, Decimal('5'), 'groceries')

    def test_non_iterable_exclusions_raise_error(self):
        """Test non-iterable exclusions raise ValueError."""
        with pytest.raises(ValueError, match="excluded_categories must be a collection"):
            UserTypeDiscount(DiscountType.AMOUNT, Decimal('5'), 5, UserType.PREMIUM)
