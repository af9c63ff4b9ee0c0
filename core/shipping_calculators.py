"""
Shipping Calculators

Pure Python business logic, NO Django imports.
Shipping calculators price a package: any object with ``contents`` (items
carrying ``quantity`` and a line ``amount``) and optionally ``currency``.
"""

from decimal import Decimal

from .calculators import (
    ZERO,
    Calculator,
    CurrencyCalculator,
    compute_flexi_amount,
    round_amount,
)
from .preferences import preference


def package_total(package) -> Decimal:
    return sum((Decimal(item.amount) for item in package.contents), ZERO)


def package_quantity(package) -> int:
    return sum(item.quantity for item in package.contents)


class ShippingCalculator(Calculator):
    def available(self, package) -> bool:
        return bool(getattr(package, "contents", None))


class FlatRate(ShippingCalculator, CurrencyCalculator):
    amount = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flat rate"

    def compute(self, package) -> Decimal:
        if not self.matches_currency(package):
            return ZERO
        return self.amount


class FlatPercentItemTotal(ShippingCalculator):
    flat_percent = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flat percent"

    def compute(self, package) -> Decimal:
        return round_amount(package_total(package) * self.flat_percent / 100)


class FlexiRate(ShippingCalculator, CurrencyCalculator):
    first_item = preference("decimal", default=0)
    additional_item = preference("decimal", default=0)
    max_items = preference("integer", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flexible Rate per package item"

    def compute(self, package) -> Decimal:
        if not self.matches_currency(package):
            return ZERO
        return compute_flexi_amount(
            package_quantity(package), self.first_item, self.additional_item, self.max_items
        )


class PerItem(ShippingCalculator, CurrencyCalculator):
    amount = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flat rate per package item"

    def compute(self, package) -> Decimal:
        if not self.matches_currency(package):
            return ZERO
        return self.amount * package_quantity(package)


class PriceSack(ShippingCalculator, CurrencyCalculator):
    """Charges normal_amount below minimal_amount, discount_amount from there on."""

    minimal_amount = preference("decimal", default=0)
    normal_amount = preference("decimal", default=0)
    discount_amount = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Price sack"

    def compute(self, package) -> Decimal:
        if not self.matches_currency(package):
            return ZERO
        if package_total(package) < self.minimal_amount:
            return self.normal_amount
        return self.discount_amount
