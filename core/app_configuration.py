"""
App Configuration

Pure Python implementation - NO Django imports.
The configuration root of a shop process: scalar preferences plus the
extension point environment. Build one per process and pass it to whoever
needs it; the Django app keeps its instance on the app config.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from . import calculators, shipping_calculators
from .environment import Environment
from .preferences import Preferable, preference


@dataclass(frozen=True)
class TaxLocation:
    """Country and state used to pick tax rates."""

    country_iso: Optional[str] = None
    state: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.country_iso is None and self.state is None


def register_default_calculators(environment: Environment) -> None:
    """Register the built-in calculators into their sets."""
    environment.calculators.shipping_methods = [
        shipping_calculators.FlatPercentItemTotal,
        shipping_calculators.FlatRate,
        shipping_calculators.FlexiRate,
        shipping_calculators.PerItem,
        shipping_calculators.PriceSack,
    ]
    environment.calculators.tax_rates = [calculators.DefaultTax]
    environment.calculators.promotion_actions_create_adjustments = [
        calculators.FlatPercentItemTotal,
        calculators.FlatRate,
        calculators.FlexiRate,
        calculators.TieredPercent,
    ]
    environment.calculators.promotion_actions_create_item_adjustments = [
        calculators.FlatRate,
        calculators.FlexiRate,
        calculators.PercentOnLineItem,
        calculators.TieredPercent,
    ]
    environment.calculators.promotion_actions_create_quantity_adjustments = [
        calculators.PercentOnLineItem,
        calculators.FlatRate,
    ]


class AppConfiguration(Preferable):
    """Process-wide shop preferences."""

    preference_store_prefix = "shop/app_configuration"

    layout = preference("string", default="shop/base.html")
    currency = preference("string", default="USD")
    default_country_iso = preference("string", default="US")
    # Country whose VAT is included in prices shown in the admin
    admin_vat_country_iso = preference("string", default=None)
    allow_guest_checkout = preference("boolean", default=True)
    auto_capture = preference("boolean", default=False)
    orders_per_page = preference("integer", default=15)
    tax_calculator_class = preference("class", default="core.calculators.DefaultTax")

    mails_from = preference(
        "string",
        default="store@example.com",
        deprecated="mails_from is not used by the shop. Set the sender on your store instead.",
    )
    extra_taxon_validations = preference(
        "boolean",
        default=True,
        deprecated="extra_taxon_validations will be removed; taxon validations always run.",
    )
    extra_taxonomy_validations = preference(
        "boolean",
        default=True,
        deprecated="extra_taxonomy_validations will be removed; taxonomy validations always run.",
    )

    @cached_property
    def environment(self) -> Environment:
        environment = Environment()
        register_default_calculators(environment)
        return environment

    @property
    def admin_vat_location(self) -> TaxLocation:
        return TaxLocation(country_iso=self.admin_vat_country_iso)
