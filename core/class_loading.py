"""
Class Loading

Pure Python helpers, NO Django imports.
Converts between classes and their dotted import paths so registries and
preferences can name classes before they are imported.
"""

import importlib
import sys


class ClassResolutionError(ImportError):
    """Raised when a dotted path does not point at an importable class."""

    pass


def class_path(cls) -> str:
    """Return the dotted import path of a class, e.g. ``core.calculators.FlatRate``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def resolve_class(path: str):
    """
    Import and return the class named by a dotted path.

    Nested classes are supported: the longest importable module prefix is
    imported and the rest of the path is walked with getattr.

    Args:
        path: Dotted path such as ``core.shipping_calculators.FlatRate``

    Returns:
        The class object

    Raises:
        ClassResolutionError: if no prefix imports or an attribute is missing
    """
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only keep walking up when the missing module is the one we asked for
            if e.name and not (module_name == e.name or module_name.startswith(e.name + ".")):
                raise
            continue

        try:
            for attribute in parts[split:]:
                target = getattr(target, attribute)
        except AttributeError:
            raise ClassResolutionError(
                f"Module '{module_name}' has no attribute path '{'.'.join(parts[split:])}'"
            ) from None

        if not isinstance(target, type):
            raise ClassResolutionError(f"'{path}' does not name a class")
        return target

    raise ClassResolutionError(f"Could not import '{path}'")


def loaded_class(path: str):
    """
    Return the class named by a dotted path if its module is already imported.

    Never imports anything. Returns None when the module is not loaded yet or
    the path does not lead to a class.
    """
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:split]))
        if module is None:
            continue
        target = module
        for attribute in parts[split:]:
            target = getattr(target, attribute, None)
            if target is None:
                return None
        return target if isinstance(target, type) else None
    return None
