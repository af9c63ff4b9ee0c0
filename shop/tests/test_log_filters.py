"""
Tests for sensitive parameter filtering.
"""
import logging

from django.test import SimpleTestCase

from shop.log_filters import FILTERED, SensitiveParametersFilter, filter_parameters


class FilterParametersTests(SimpleTestCase):
    """Tests for filter_parameters."""

    def test_passwords_are_filtered(self):
        params = {"username": "mary", "password": "secret", "password_confirmation": "secret"}

        self.assertEqual(
            filter_parameters(params),
            {"username": "mary", "password": FILTERED, "password_confirmation": FILTERED},
        )

    def test_nested_passwords_are_filtered(self):
        params = {"user": {"email": "mary@example.com", "password": "secret"}}

        self.assertEqual(filter_parameters(params)["user"]["password"], FILTERED)

    def test_similar_keys_are_kept(self):
        params = {"password_hint": "pet name", "order": {"number": "R123"}}

        self.assertEqual(filter_parameters(params), params)

    def test_card_details_in_payment_source_are_filtered(self):
        params = {
            "order": {
                "payments_attributes": [
                    {
                        "payment_method_id": "1",
                        "source_attributes": {
                            "number": "4111111111111111",
                            "verification_value": "123",
                            "name": "Mary Jane Watson",
                        },
                    }
                ]
            }
        }

        source = filter_parameters(params)["order"]["payments_attributes"][0]["source_attributes"]

        self.assertEqual(source["number"], FILTERED)
        self.assertEqual(source["verification_value"], FILTERED)
        self.assertEqual(source["name"], "Mary Jane Watson")

    def test_original_is_not_modified(self):
        params = {"password": "secret"}

        filter_parameters(params)

        self.assertEqual(params, {"password": "secret"})


class SensitiveParametersFilterTests(SimpleTestCase):
    """Tests for the logging filter."""

    def setUp(self):
        self.logger = logging.getLogger("shop.tests.sensitive")
        self.logger.addFilter(SensitiveParametersFilter())
        self.addCleanup(self.logger.filters.clear)

    def test_positional_mapping_argument(self):
        with self.assertLogs(self.logger, level="INFO") as logs:
            self.logger.info("Parameters: %s", {"username": "mary", "password": "secret"})

        self.assertNotIn("secret", logs.output[0])
        self.assertIn(FILTERED, logs.output[0])
        self.assertIn("mary", logs.output[0])

    def test_mapping_arguments(self):
        with self.assertLogs(self.logger, level="INFO") as logs:
            self.logger.info("Login by %(username)s with %(password)s", {"username": "mary", "password": "secret"})

        self.assertEqual(logs.output[0], f"INFO:shop.tests.sensitive:Login by mary with {FILTERED}")

    def test_plain_arguments_untouched(self):
        with self.assertLogs(self.logger, level="INFO") as logs:
            self.logger.info("Order %s placed", "R123")

        self.assertIn("Order R123 placed", logs.output[0])
