"""
Shop Service Layer

Bridges Django settings, the app registry and the database with the
framework-agnostic configuration objects in the core module.
"""
import logging
from collections.abc import MutableMapping

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from core.app_configuration import AppConfiguration
from core.environment import Environment
from .models import Preference
from .signals import environment_ready

logger = logging.getLogger(__name__)


class DatabasePreferenceStore(MutableMapping):
    """
    Preference store backed by the Preference model.

    Every read and write hits the database, so values changed by another
    process are picked up on the next read.
    """

    def __getitem__(self, key):
        try:
            return Preference.objects.get(key=key).value
        except Preference.DoesNotExist:
            raise KeyError(key) from None

    def __setitem__(self, key, value):
        Preference.objects.update_or_create(key=key, defaults={"value": value})

    def __delitem__(self, key):
        deleted, _ = Preference.objects.filter(key=key).delete()
        if not deleted:
            raise KeyError(key)

    def __contains__(self, key):
        return Preference.objects.filter(key=key).exists()

    def __iter__(self):
        return iter(Preference.objects.values_list("key", flat=True))

    def __len__(self):
        return Preference.objects.count()


def build_configuration(store=None) -> AppConfiguration:
    """
    Create the AppConfiguration for this process.

    Args:
        store: Preference store to use. When omitted, SHOP_PREFERENCE_STORE
            picks ``"memory"`` (default) or ``"database"``.

    Returns:
        AppConfiguration with its default calculators registered
    """
    if store is None:
        backend = getattr(settings, "SHOP_PREFERENCE_STORE", "memory")
        if backend == "memory":
            store = {}
        elif backend == "database":
            store = DatabasePreferenceStore()
        else:
            raise ImproperlyConfigured(
                f"SHOP_PREFERENCE_STORE must be 'memory' or 'database', got {backend!r}"
            )
    return AppConfiguration(store=store)


def register_from_settings(environment: Environment, registrations=None) -> int:
    """
    Add the classes listed in SHOP_ENVIRONMENT to the environment.

    Args:
        environment: Environment to register into
        registrations: Mapping of dotted set name to classes or dotted paths;
            defaults to settings.SHOP_ENVIRONMENT

    Returns:
        Number of classes that were not already registered
    """
    if registrations is None:
        registrations = getattr(settings, "SHOP_ENVIRONMENT", {})

    added = 0
    for set_name, types in registrations.items():
        try:
            preference_set = environment.lookup(set_name)
        except KeyError:
            raise ImproperlyConfigured(
                f"SHOP_ENVIRONMENT names unknown preference set '{set_name}'. "
                f"Valid names: {', '.join(environment.set_names())}"
            ) from None
        for type_ in types:
            try:
                added_now = preference_set.add(type_)
            except TypeError as e:
                raise ImproperlyConfigured(
                    f"SHOP_ENVIRONMENT['{set_name}'] contains {type_!r}: {e}"
                ) from e
            if added_now:
                added += 1
                logger.debug("Registered %s into %s", type_, set_name)
    return added


def run_registration_hooks(environment: Environment, hooks=None) -> None:
    """
    Call each hook in SHOP_REGISTRATION_HOOKS with the environment.

    Args:
        environment: Environment passed to every hook
        hooks: Callables or dotted paths to callables; defaults to
            settings.SHOP_REGISTRATION_HOOKS
    """
    if hooks is None:
        hooks = getattr(settings, "SHOP_REGISTRATION_HOOKS", [])

    for hook in hooks:
        if isinstance(hook, str):
            try:
                hook = import_string(hook)
            except ImportError as e:
                raise ImproperlyConfigured(f"Cannot import registration hook '{hook}': {e}") from e
        hook(environment)


def run_registrations(environment: Environment) -> None:
    """Run settings registrations, then hooks, then the environment_ready signal."""
    added = register_from_settings(environment)
    run_registration_hooks(environment)
    environment_ready.send(sender=Environment, environment=environment)
    logger.info(
        "Shop environment ready: %d preference sets, %d classes added from settings",
        len(environment.set_names()),
        added,
    )


def get_configuration() -> AppConfiguration:
    """Return the AppConfiguration built when the shop app became ready."""
    return apps.get_app_config("shop").configuration


def get_environment() -> Environment:
    """Shortcut for get_configuration().environment."""
    return get_configuration().environment
