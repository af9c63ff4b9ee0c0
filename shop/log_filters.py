"""
Sensitive Parameter Filtering

Redacts passwords and payment card details from request parameters before
they are logged.
"""
import logging
import re
from collections.abc import Mapping

FILTERED = "[FILTERED]"

# Matched against both the bare key and the dotted path of nested keys
SENSITIVE_PARAMETERS = [
    re.compile(r"^password$"),
    re.compile(r"^password_confirmation$"),
    re.compile(r"payment.*source.*\.number$"),
    re.compile(r"payment.*source.*\.verification_value$"),
]


def is_sensitive(key: str, path: str) -> bool:
    return any(pattern.search(key) or pattern.search(path) for pattern in SENSITIVE_PARAMETERS)


def filter_parameters(params: Mapping, parent_path: str = "") -> dict:
    """
    Return a copy of params with sensitive values replaced by ``[FILTERED]``.

    Nested mappings are walked; their keys are joined with dots, so
    ``{"payment": {"source": {"number": "4111..."}}}`` is checked as
    ``payment.source.number``. Lists of mappings share their parent's path.

    Example:
        >>> filter_parameters({"username": "mary", "password": "secret"})
        {'username': 'mary', 'password': '[FILTERED]'}
    """
    filtered = {}
    for key, value in params.items():
        path = f"{parent_path}.{key}" if parent_path else str(key)
        if is_sensitive(str(key), path):
            filtered[key] = FILTERED
        elif isinstance(value, Mapping):
            filtered[key] = filter_parameters(value, path)
        elif isinstance(value, (list, tuple)):
            filtered[key] = [
                filter_parameters(item, path) if isinstance(item, Mapping) else item
                for item in value
            ]
        else:
            filtered[key] = value
    return filtered


class SensitiveParametersFilter(logging.Filter):
    """Logging filter that redacts mappings passed as log record arguments."""

    def filter(self, record):
        if isinstance(record.args, Mapping):
            record.args = filter_parameters(record.args)
        elif isinstance(record.args, tuple):
            record.args = tuple(
                filter_parameters(arg) if isinstance(arg, Mapping) else arg
                for arg in record.args
            )
        return True
