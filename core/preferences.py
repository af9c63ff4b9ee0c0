"""
Preferences

Pure Python implementation - NO Django imports.
Typed, defaulted preference declarations for configuration objects and
calculators. Values live in any MutableMapping, so the same declarations
work in memory or against a persistent store.
"""

import warnings
from decimal import Decimal, InvalidOperation

from .class_loading import class_path, resolve_class


class ShopDeprecationWarning(DeprecationWarning):
    """Warning category for preferences scheduled for removal."""

    pass


_TRUE_STRINGS = {"true", "t", "yes", "y", "on", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "off", "0", ""}


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError(f"'{value}' is not a valid decimal")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"'{value}' is not a valid decimal") from None


def _to_integer(value):
    if isinstance(value, (float, Decimal)) and value != int(value):
        raise ValueError(f"'{value}' is not a whole number")
    return int(value)


def _to_boolean(value):
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"'{value}' is not a valid boolean")
    return bool(value)


def _to_class_path(value):
    if isinstance(value, type):
        return class_path(value)
    if isinstance(value, str) and value:
        return value
    raise ValueError(f"Expected a class or a dotted path, got {value!r}")


# type name -> function converting a written value into its stored form
COERCIONS = {
    "string": str,
    "text": str,
    "integer": _to_integer,
    "decimal": _to_decimal,
    "boolean": _to_boolean,
    "hash": dict,
    "array": list,
    "class": _to_class_path,
    "any": lambda value: value,
}


class Preference:
    """A single declared preference. Use the preference() factory to declare one."""

    def __init__(self, type_="any", default=None, deprecated=None):
        if type_ not in COERCIONS:
            raise ValueError(f"Unknown preference type '{type_}'")
        self.type = type_
        self.default = default
        self.deprecated = deprecated
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.get_preference(self.name)

    def __set__(self, instance, value):
        instance.set_preference(self.name, value)

    def dump(self, value):
        """Convert a written value into what the store keeps."""
        if value is None:
            return None
        return COERCIONS[self.type](value)

    def load(self, stored):
        """Convert a stored value back into what readers receive."""
        if stored is None:
            return None
        if self.type == "class":
            return resolve_class(stored)
        # Persistent stores may hand back JSON-native values (e.g. decimals as strings)
        return COERCIONS[self.type](stored)

    def default_value(self):
        default = self.default() if callable(self.default) else self.default
        return self.load(self.dump(default))


def preference(type_="any", default=None, deprecated=None) -> Preference:
    """
    Declare a preference on a Preferable subclass.

    Args:
        type_: One of the keys of COERCIONS
        default: Value used while nothing is stored; callables are called per read
        deprecated: Warning message emitted whenever the preference is written
    """
    return Preference(type_, default=default, deprecated=deprecated)


class Preferable:
    """
    Base class for objects that carry declared preferences.

    Preference values are read from and written to ``store``. Keys are
    prefixed with ``preference_store_prefix`` when it is set so several
    objects can share one persistent store.
    """

    preference_store_prefix = None

    def __init__(self, store=None, **preferences):
        self._store = {} if store is None else store
        for name, value in preferences.items():
            if name not in self.defined_preferences():
                raise TypeError(f"{type(self).__name__} has no preference '{name}'")
            self.set_preference(name, value)

    @classmethod
    def defined_preferences(cls) -> dict:
        declared = {}
        for klass in reversed(cls.__mro__):
            for name, attribute in vars(klass).items():
                if isinstance(attribute, Preference):
                    declared[name] = attribute
        return declared

    def has_preference(self, name: str) -> bool:
        return name in self.defined_preferences()

    def _definition(self, name: str) -> Preference:
        try:
            return self.defined_preferences()[name]
        except KeyError:
            raise KeyError(f"{type(self).__name__} has no preference '{name}'") from None

    def _store_key(self, name: str) -> str:
        if self.preference_store_prefix:
            return f"{self.preference_store_prefix}/{name}"
        return name

    def get_preference(self, name: str):
        definition = self._definition(name)
        key = self._store_key(name)
        if key in self._store:
            return definition.load(self._store[key])
        return definition.default_value()

    def set_preference(self, name: str, value) -> None:
        definition = self._definition(name)
        if definition.deprecated:
            warnings.warn(definition.deprecated, ShopDeprecationWarning, stacklevel=3)
        self._store[self._store_key(name)] = definition.dump(value)

    def reset_preference(self, name: str) -> None:
        """Forget a stored value so the default applies again."""
        self._definition(name)
        self._store.pop(self._store_key(name), None)

    @property
    def preferences(self) -> dict:
        return {name: self.get_preference(name) for name in self.defined_preferences()}

    def __getitem__(self, name):
        return self.get_preference(name)

    def __setitem__(self, name, value):
        self.set_preference(name, value)
