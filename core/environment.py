"""
Shop Environment

Pure Python registry of extension points, NO Django imports.

The environment is a fixed tree of named preference sets. Each set holds the
implementation classes registered for one extension point (payment methods,
stock splitters, calculators, promotion rules and actions). Application and
plugin bootstrap code adds to the sets; business code iterates them.

Mutation is expected during process start only. Nothing here is locked, and
changing a set while another thread iterates it is undefined.
"""

from .class_loading import class_path, loaded_class, resolve_class


class PreferenceSet:
    """
    Ordered, duplicate-free collection of class references.

    Members are classes, compared by identity. A dotted import path may be
    given instead of a class; it is resolved as soon as its module has been
    imported, and at the latest when the set is read, so a path and the class
    it names (through any re-export) count as the same member.
    """

    def __init__(self, types=()):
        # class objects, or dotted paths whose module is not imported yet
        self._members = []
        for type_ in types:
            self.add(type_)

    @staticmethod
    def _check(type_):
        if isinstance(type_, type) or (isinstance(type_, str) and type_):
            return type_
        raise TypeError(f"Expected a class or a dotted path, got {type_!r}")

    @staticmethod
    def _same(member, other) -> bool:
        if isinstance(member, str) and isinstance(other, str):
            return member == other
        return member is other

    def _settle(self, resolve=None):
        """Resolve pending paths with ``resolve`` and drop members that turn out to be duplicates."""
        resolve = resolve or loaded_class
        settled = []
        for member in self._members:
            if isinstance(member, str):
                member = resolve(member) or member
            if not any(self._same(member, existing) for existing in settled):
                settled.append(member)
        self._members = settled

    def _normalize(self, type_):
        type_ = self._check(type_)
        if isinstance(type_, str):
            return loaded_class(type_) or type_
        return type_

    def _index(self, type_):
        self._settle()
        type_ = self._normalize(type_)
        for index, member in enumerate(self._members):
            if self._same(member, type_):
                return index, type_
        return None, type_

    def add(self, type_) -> bool:
        """Append a type unless it is already present. Returns True if it was added."""
        index, type_ = self._index(type_)
        if index is not None:
            return False
        self._members.append(type_)
        return True

    def remove(self, type_) -> None:
        """Remove a type. Removing an absent type does nothing."""
        index, _ = self._index(type_)
        if index is not None:
            del self._members[index]

    def contains(self, type_) -> bool:
        index, _ = self._index(type_)
        return index is not None

    def replace(self, types) -> None:
        """Replace the whole contents, keeping this object's identity."""
        self._members = []
        for type_ in types:
            self.add(type_)

    def names(self) -> tuple:
        """Dotted paths of the members in insertion order, without importing them."""
        self._settle()
        return tuple(
            member if isinstance(member, str) else class_path(member) for member in self._members
        )

    def to_sequence(self) -> tuple:
        """
        Snapshot of the member classes in first-insertion order.

        Raises:
            ClassResolutionError: if a registered path cannot be imported
        """
        self._settle(resolve=resolve_class)
        return tuple(self._members)

    def __contains__(self, type_):
        try:
            return self.contains(type_)
        except TypeError:
            return False

    def __iter__(self):
        return iter(self.to_sequence())

    def __len__(self):
        self._settle()
        return len(self._members)

    def __bool__(self):
        return bool(self._members)

    def __repr__(self):
        return f"<PreferenceSet {list(self.names())}>"


class preference_set:
    """
    Declares a lazily created PreferenceSet attribute on a namespace.

    The set is created on first access and stored on the instance, so every
    later access returns the same object. Assigning a list replaces the set's
    contents in place.
    """

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            return instance.__dict__.setdefault(self.name, PreferenceSet())

    def __set__(self, instance, types):
        self.__get__(instance).replace(types)


class namespace:
    """Declares a lazily created, memoized nested namespace attribute."""

    def __init__(self, namespace_class):
        self.namespace_class = namespace_class

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            return instance.__dict__.setdefault(self.name, self.namespace_class())

    def __set__(self, instance, value):
        raise AttributeError(f"Namespace '{self.name}' cannot be replaced")


class Namespace:
    """Base class for a fixed group of preference sets and nested namespaces."""

    @classmethod
    def _declarations(cls):
        declared = {}
        for klass in reversed(cls.__mro__):
            for name, attribute in vars(klass).items():
                if isinstance(attribute, (preference_set, namespace)):
                    declared[name] = attribute
        return declared

    def set_names(self) -> list:
        """Dotted names of every preference set below this namespace."""
        names = []
        for name, attribute in self._declarations().items():
            if isinstance(attribute, namespace):
                names.extend(f"{name}.{child}" for child in getattr(self, name).set_names())
            else:
                names.append(name)
        return names

    def lookup(self, dotted_name: str) -> PreferenceSet:
        """
        Look up a set by dotted name, e.g. ``calculators.shipping_methods``.

        Raises:
            KeyError: if the name does not denote a declared preference set
        """
        head, _, rest = dotted_name.partition(".")
        attribute = self._declarations().get(head)
        if isinstance(attribute, namespace) and rest:
            return getattr(self, head).lookup(rest)
        if isinstance(attribute, preference_set) and not rest:
            return getattr(self, head)
        raise KeyError(dotted_name)


class Calculators(Namespace):
    """Calculator classes available to each kind of calculable."""

    shipping_methods = preference_set()
    tax_rates = preference_set()
    promotion_actions_create_adjustments = preference_set()
    promotion_actions_create_item_adjustments = preference_set()
    promotion_actions_create_quantity_adjustments = preference_set()


class Promotions(Namespace):
    rules = preference_set()
    actions = preference_set()
    shipping_actions = preference_set()


class Environment(Namespace):
    """Root of the extension point tree."""

    payment_methods = preference_set()
    stock_splitters = preference_set()
    calculators = namespace(Calculators)
    promotions = namespace(Promotions)
