"""
Calculators

Pure Python business logic, framework-agnostic.
This module should have NO Django imports.

Adjustment and tax calculators. A calculator is computed against a
calculable object (an order, a line item) and reads only the attributes it
needs: ``amount``, ``item_total``, ``quantity`` and ``currency``.
"""

from decimal import ROUND_HALF_UP, Decimal

from .preferences import Preferable, preference

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_amount(value) -> Decimal:
    """Round half-up to cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def amount_of(calculable) -> Decimal:
    """Order item total when present, otherwise the calculable's own amount."""
    amount = getattr(calculable, "item_total", None)
    if amount is None:
        amount = getattr(calculable, "amount", ZERO)
    return Decimal(amount)


def quantity_of(calculable) -> int:
    """Quantity of a line item, or the summed quantities of an order's line items."""
    if hasattr(calculable, "quantity"):
        return calculable.quantity
    return sum(item.quantity for item in getattr(calculable, "line_items", ()))


class Calculator(Preferable):
    """Base class for all calculators."""

    def compute(self, calculable) -> Decimal:
        raise NotImplementedError(f"{type(self).__name__} must implement compute()")

    def available(self, calculable) -> bool:
        """Whether this calculator can be used for the calculable at all."""
        return True

    @classmethod
    def description(cls) -> str:
        return cls.__name__

    def __repr__(self):
        return f"<{type(self).__name__} {self.preferences}>"


class CurrencyCalculator(Calculator):
    """Calculators that only apply to calculables in their own currency."""

    currency = preference("string", default="USD")

    def matches_currency(self, calculable) -> bool:
        return getattr(calculable, "currency", self.currency) == self.currency


def compute_flexi_amount(quantity, first_item, additional_item, max_items) -> Decimal:
    """First item at one price, following items at another, up to max_items (0 means no limit)."""
    total = ZERO
    for index in range(quantity):
        if index == 0:
            total += first_item
        elif max_items == 0 or index < max_items:
            total += additional_item
    return total


class FlatRate(CurrencyCalculator):
    amount = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flat Rate"

    def compute(self, calculable) -> Decimal:
        if not self.matches_currency(calculable):
            return ZERO
        return self.amount


class FlexiRate(CurrencyCalculator):
    first_item = preference("decimal", default=0)
    additional_item = preference("decimal", default=0)
    max_items = preference("integer", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flexible Rate"

    def compute(self, calculable) -> Decimal:
        if not self.matches_currency(calculable):
            return ZERO
        return compute_flexi_amount(
            quantity_of(calculable), self.first_item, self.additional_item, self.max_items
        )


class FlatPercentItemTotal(Calculator):
    flat_percent = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Flat Percent"

    def compute(self, calculable) -> Decimal:
        return round_amount(amount_of(calculable) * self.flat_percent / 100)


class PercentOnLineItem(Calculator):
    percent = preference("decimal", default=0)

    @classmethod
    def description(cls) -> str:
        return "Percent Per Item"

    def compute(self, calculable) -> Decimal:
        return round_amount(calculable.amount * self.percent / 100)


class TieredPercent(CurrencyCalculator):
    """
    Percentage discount that grows with the amount.

    ``tiers`` maps a threshold amount to the percent used once the amount
    reaches it. Below every threshold ``base_percent`` applies.
    """

    base_percent = preference("decimal", default=0)
    tiers = preference("hash", default=dict)

    @classmethod
    def description(cls) -> str:
        return "Tiered Percent"

    def percent_for(self, amount) -> Decimal:
        tiers = sorted(
            ((Decimal(str(threshold)), Decimal(str(percent))) for threshold, percent in self.tiers.items()),
            reverse=True,
        )
        for threshold, percent in tiers:
            if amount >= threshold:
                return percent
        return self.base_percent

    def compute(self, calculable) -> Decimal:
        if not self.matches_currency(calculable):
            return ZERO
        amount = amount_of(calculable)
        return round_amount(amount * self.percent_for(amount) / 100)


class DefaultTax(Calculator):
    """
    Tax on the calculable's amount.

    When ``included_in_price`` is set the amount already contains the tax and
    the computed value is the tax portion of it.
    """

    rate = preference("decimal", default=0)
    included_in_price = preference("boolean", default=False)

    @classmethod
    def description(cls) -> str:
        return "Default Tax"

    def compute(self, calculable) -> Decimal:
        amount = amount_of(calculable)
        if self.included_in_price:
            return round_amount(amount - amount / (1 + self.rate))
        return round_amount(amount * self.rate)


def available_calculators(calculator_set, calculable) -> list:
    """Calculator classes from a preference set whose default instance is available for the calculable."""
    return [
        calculator_class
        for calculator_class in calculator_set.to_sequence()
        if calculator_class().available(calculable)
    ]
