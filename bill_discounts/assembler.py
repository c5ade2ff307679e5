"""Bill assembly module.

This module builds a bill and its ordered discount lists from
plain payloads (dicts, JSON strings or JSON files).
"""

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from .discounts import Discount, GenericDiscount, UserTypeDiscount
from .models import Bill, User


class BillAssembler:
    """Assembles bills with their discounts attached.

    Discounts are attached in the order they appear in the payload,
    which is the order they are evaluated in.
    """

    def assemble_from_dict(self, data: dict[str, Any]) -> Bill:
        """Assemble a bill from a dictionary representation.

        Args:
            data: Dictionary containing bill data with keys:
                - user: Dict with the user's user_type
                - net: The bill's net before discounts
                - category: Optional bill category
                - mutually_exclusive_discounts: Optional list of discount dicts
                - always_applicable_discounts: Optional list of discount dicts

        Returns:
            A Bill object with its discount lists populated.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        if not isinstance(data, dict):
            raise ValueError("bill data must be an object")
        if not data.get('user'):
            raise ValueError("user is required")
        if data.get('net') is None:
            raise ValueError("net is required")

        user = self._assemble_user(data['user'])
        bill = Bill(
            user=user,
            net=self._parse_amount(data['net']),
            category=data.get('category')
        )
        bill.mutually_exclusive_discounts = self._assemble_discounts(
            data.get('mutually_exclusive_discounts') or []
        )
        bill.always_applicable_discounts = self._assemble_discounts(
            data.get('always_applicable_discounts') or []
        )
        return bill

    def assemble_from_json(self, json_str: str) -> Bill:
        """Assemble a bill from a JSON string.

        Raises:
            ValueError: If JSON is invalid or data is missing.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e

        return self.assemble_from_dict(data)

    def assemble_from_json_file(self, file_path: str) -> Bill:
        """Assemble a bill from a JSON file.

        Raises:
            ValueError: If the file contains invalid data.
            FileNotFoundError: If file does not exist.
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            return self.assemble_from_json(f.read())

    @staticmethod
    def _assemble_user(user_data: Any) -> User:
        if not isinstance(user_data, dict):
            raise ValueError("user must be an object")
        return User(user_type=user_data.get('user_type'))

    def _assemble_discounts(self, discounts_data: list[dict]) -> list[Discount]:
        """Assemble discounts from a list of dictionaries.

        Args:
            discounts_data: List of dictionaries with discount data.

        Returns:
            List of discounts, in payload order.
        """
        if not isinstance(discounts_data, list):
            raise ValueError("discounts must be a list")

        discounts = []
        for d in discounts_data:
            if not isinstance(d, dict):
                raise ValueError("discount must be an object")
            kind = d.get('kind', 'generic')
            value = d.get('discount_value')
            excluded = d.get('excluded_categories')
            if excluded is None:
                excluded = []
            elif not isinstance(excluded, list):
                raise ValueError("excluded_categories must be a list")
            common = {
                'discount_type': d.get('discount_type'),
                'discount_value': None if value is None else self._parse_amount(value),
                'excluded_categories': excluded,
            }

            if kind == 'user_type':
                discounts.append(UserTypeDiscount(user_type=d.get('user_type'), **common))
            elif kind == 'generic':
                discounts.append(GenericDiscount(**common))
            else:
                raise ValueError(f"Unknown discount kind: {kind}")

        return discounts

    @staticmethod
    def _parse_amount(value: Any) -> Decimal:
        """Parse a value into a Decimal amount.

        Handles strings with currency symbols, commas, etc.

        Raises:
            ValueError: If value cannot be parsed.
        """
        if isinstance(value, bool):
            raise ValueError(f"Unsupported type for amount: {type(value)}")

        if isinstance(value, Decimal):
            return value

        if isinstance(value, (int, float)):
            return Decimal(str(value))

        if isinstance(value, str):
            # Remove currency symbols, thousands separators, and whitespace
            cleaned = re.sub(r'[\s,$€£]', '', value)
            if not cleaned:
                raise ValueError(f"Cannot parse amount: {value}")
            try:
                return Decimal(cleaned)
            except InvalidOperation:
                raise ValueError(f"Cannot parse amount: {value}")

        raise ValueError(f"Unsupported type for amount: {type(value)}")
