"""
Tests for preference declarations and the app configuration.
"""
import unittest
from decimal import Decimal

from core.app_configuration import AppConfiguration, TaxLocation
from core.calculators import DefaultTax, FlatRate
from core.class_loading import ClassResolutionError
from core.environment import Environment
from core.preferences import Preferable, ShopDeprecationWarning, preference


class Widget(Preferable):
    name = preference("string", default="widget")
    size = preference("integer", default=1)
    price = preference("decimal", default=0)
    enabled = preference("boolean", default=False)
    options = preference("hash", default=dict)
    tags = preference("array", default=list)
    handler = preference("class", default=None)
    legacy = preference("string", default="old", deprecated="legacy is going away")


class PrefixedWidget(Widget):
    preference_store_prefix = "widgets/1"


class TestPreferable(unittest.TestCase):
    """Tests for the Preferable base class."""

    def test_defaults(self):
        widget = Widget()

        self.assertEqual(widget.name, "widget")
        self.assertEqual(widget.size, 1)
        self.assertEqual(widget.price, Decimal("0"))
        self.assertFalse(widget.enabled)
        self.assertEqual(widget.options, {})
        self.assertIsNone(widget.handler)

    def test_constructor_sets_preferences(self):
        widget = Widget(name="gear", size="3")

        self.assertEqual(widget.name, "gear")
        self.assertEqual(widget.size, 3)

    def test_constructor_rejects_unknown_preference(self):
        with self.assertRaises(TypeError):
            Widget(colour="red")

    def test_decimal_coercion(self):
        widget = Widget(price="10.50")

        self.assertEqual(widget.price, Decimal("10.50"))
        self.assertIsInstance(widget.price, Decimal)

    def test_invalid_decimal(self):
        with self.assertRaises(ValueError):
            Widget(price="ten")

    def test_blank_decimal_is_rejected(self):
        for raw in ("", "   "):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Widget(price=raw)

    def test_fractional_integer_is_rejected(self):
        with self.assertRaises(ValueError):
            Widget(size=3.7)
        with self.assertRaises(ValueError):
            Widget(size=Decimal("2.5"))

        self.assertEqual(Widget(size=4.0).size, 4)

    def test_boolean_coercion(self):
        widget = Widget()

        for raw, expected in (("true", True), ("0", False), ("Yes", True), (1, True), ("off", False)):
            with self.subTest(raw=raw):
                widget.enabled = raw
                self.assertIs(widget.enabled, expected)

    def test_invalid_boolean(self):
        with self.assertRaises(ValueError):
            Widget(enabled="maybe")

    def test_none_is_stored_as_is(self):
        widget = Widget(name=None)

        self.assertIsNone(widget.name)

    def test_callable_default_is_fresh_per_read(self):
        widget = Widget()

        widget.tags.append("mutated")

        self.assertEqual(widget.tags, [])

    def test_class_preference_accepts_class_or_path(self):
        widget = Widget(handler=FlatRate)
        self.assertIs(widget.handler, FlatRate)

        widget.handler = "core.calculators.DefaultTax"
        self.assertIs(widget.handler, DefaultTax)

    def test_class_preference_with_bad_path(self):
        widget = Widget(handler="core.calculators.Missing")

        with self.assertRaises(ClassResolutionError):
            widget.handler

    def test_item_access(self):
        widget = Widget()
        widget["name"] = "sprocket"

        self.assertEqual(widget["name"], "sprocket")

    def test_unknown_preference_by_name_raises_key_error(self):
        widget = Widget()

        with self.assertRaises(KeyError):
            widget["colour"]

        with self.assertRaises(KeyError):
            widget["colour"] = "red"

    def test_deprecated_preference_warns_and_still_sets(self):
        widget = Widget()

        with self.assertWarnsRegex(ShopDeprecationWarning, "legacy is going away"):
            widget.legacy = "new"

        self.assertEqual(widget.legacy, "new")

    def test_reset_preference(self):
        widget = Widget(size=5)

        widget.reset_preference("size")

        self.assertEqual(widget.size, 1)

    def test_preferences_dict(self):
        widget = Widget(size=2)

        self.assertEqual(widget.preferences["size"], 2)
        self.assertEqual(set(widget.preferences), set(Widget.defined_preferences()))

    def test_external_store_with_prefix(self):
        store = {}
        widget = PrefixedWidget(store=store, size=4)

        self.assertEqual(store, {"widgets/1/size": 4})
        self.assertEqual(PrefixedWidget(store=store).size, 4)

    def test_store_values_are_coerced_on_read(self):
        """Values coming back from JSON stores are converted to the declared type."""
        widget = Widget(store={"price": "19.99", "enabled": "true"})

        self.assertEqual(widget.price, Decimal("19.99"))
        self.assertIs(widget.enabled, True)

    def test_unknown_preference_type(self):
        with self.assertRaises(ValueError):
            preference("color")


class TestAppConfiguration(unittest.TestCase):
    """Tests for AppConfiguration."""

    def setUp(self):
        self.config = AppConfiguration()

    def test_layout_can_be_changed(self):
        self.config.layout = "my/layout.html"

        self.assertEqual(self.config.layout, "my/layout.html")

    def test_default_country_iso(self):
        self.assertEqual(self.config["default_country_iso"], "US")

    def test_admin_vat_country_iso_defaults_to_none(self):
        self.assertIsNone(self.config["admin_vat_country_iso"])

    def test_admin_vat_location_defaults(self):
        location = self.config.admin_vat_location

        self.assertEqual(location, TaxLocation())
        self.assertIsNone(location.country_iso)
        self.assertIsNone(location.state)
        self.assertTrue(location.empty)

    def test_admin_vat_location_follows_country(self):
        self.config.admin_vat_country_iso = "DE"

        self.assertEqual(self.config.admin_vat_location, TaxLocation(country_iso="DE"))

    def test_tax_calculator_class_default(self):
        self.assertIs(self.config.tax_calculator_class, DefaultTax)

    def test_environment(self):
        self.assertIsInstance(self.config.environment, Environment)
        self.assertIs(self.config.environment, self.config.environment)

    def test_environment_is_per_configuration(self):
        self.assertIsNot(self.config.environment, AppConfiguration().environment)

    def test_deprecated_preferences(self):
        for name, value in (
            ("mails_from", "shop@example.com"),
            ("extra_taxon_validations", False),
            ("extra_taxonomy_validations", False),
        ):
            with self.subTest(name=name):
                with self.assertWarns(ShopDeprecationWarning):
                    self.config[name] = value
                self.assertEqual(self.config[name], value)

    def test_preferences_use_store_prefix(self):
        store = {}
        config = AppConfiguration(store=store, currency="EUR")

        self.assertEqual(store, {"shop/app_configuration/currency": "EUR"})
        self.assertEqual(config.currency, "EUR")


if __name__ == "__main__":
    unittest.main()
