"""
Argscan argument specifications.

Overview
- Kind
  • OPTION: matched by a "-x" (short) or "--name" (long) token.
  • SUBCOMMAND: matched by a bare token equal to the spec name.

- Cardinality (closed family, matched structurally in the parser)
  • Zero():   takes no parameters.
  • Exact(n): takes exactly n parameters.
  • More(n):  takes strictly more than n parameters, greedily.
  • Less(n):  takes at most n - 1 parameters, greedily.

- ArgSpec
  • Immutable declaration: name, short, long, kind, cardinality.
  • Fields are exposed as read-only properties (see ArgumentType).

Metadata (sanitized on construction)
- name: non-empty string, used as the result key.
- short: Unset | single character (options only).
- long: Unset | non-empty string (options only).
- kind: Kind.
- cardinality: Unset (→ Zero()) | Cardinality.

Notes
- Uniqueness of names across a registry is not checked here; see
  ConfigBuilder.build(strict=True).
- An option with neither short nor long is accepted but never matched.

Quick example:
    >>> from argscan.arguments import ArgSpec, Kind, Exact
    >>> ArgSpec("output", "o", "output", cardinality=Exact(1))
    arg-spec(name='output', short='o', long='output', kind=<Kind.OPTION: 'option'>, cardinality=Exact(1))
"""
import functools
import operator
import re
from enum import Enum

from .utils import *


class Kind(Enum):
    """
    How an ArgSpec is matched against raw tokens.
    """
    OPTION = "option"
    SUBCOMMAND = "subcommand"


class Cardinality:
    """
    Base of the parameter-count rules.

    Concrete rules are Zero, Exact, More and Less. Each carries a non-negative
    integer `count`; rules compare equal when both type and count match.
    The base class itself cannot be instantiated.
    """
    __slots__ = ("_count",)
    __match_args__ = ("count",)

    def __new__(cls, *args, **kwargs):
        if cls is Cardinality:
            raise TypeError("Cardinality cannot be instantiated directly; use Zero, Exact, More or Less")
        return super().__new__(cls)

    def __init__(self, count, /):
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError(f"{type(self).__name__}() count must be an integer")
        if count < 0:
            raise ValueError(f"{type(self).__name__}() count cannot be negative")
        self._count = count

    @property
    def count(self):
        return self._count

    def __eq__(self, other, /):
        if not isinstance(other, Cardinality):
            return NotImplemented
        return type(self) is type(other) and self._count == other._count

    def __hash__(self):
        return hash((type(self).__name__, self._count))

    def __repr__(self):
        return f"{type(self).__name__}({self._count})"


class Zero(Cardinality):
    """No parameters."""
    __slots__ = ()

    def __init__(self, /):
        super().__init__(0)

    def __repr__(self):
        return "Zero()"


class Exact(Cardinality):
    """Exactly `count` parameters, taken unconditionally."""
    __slots__ = ()


class More(Cardinality):
    """Strictly more than `count` parameters, taken greedily."""
    __slots__ = ()


class Less(Cardinality):
    """
    Strictly fewer than `count` parameters, taken greedily.

    The parser caps consumption at count - 1, so the bound must be positive.
    """
    __slots__ = ()

    def __init__(self, count, /):
        super().__init__(count)
        if count < 1:
            raise ValueError("Less() count must be a positive integer")


class ArgumentType(type):
    """
    Metaclass that turns spec classes into introspectable, read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the "_<name>" backing slot.
    - Provide stable __repr__/__rich_repr__ implementations.
    - Seal the class against subclassing when created with sealed=True.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with every displayable field.
            """
            fields = ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            return f"{type(self).__typename__}({fields})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, value) pairs for pretty printers such as rich.
            """
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize ArgSpec metadata in place.

    Raises
    - TypeError: wrong value types, or short/long given to a subcommand.
    - ValueError: empty name, empty long form, or a short form longer than
      one character.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    if not isinstance(kind := metadata["kind"], Kind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a Kind")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and len(short) != 1:
        raise ValueError(f"{cls.__typename__} 'short' must be a single character")

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not long:
        raise ValueError(f"{cls.__typename__} 'long' cannot be empty")

    # Subcommands are matched by their name only.
    if kind is Kind.SUBCOMMAND and (short is not Unset or long is not Unset):
        raise TypeError(f"subcommand {cls.__typename__} cannot specify 'short' or 'long'")

    metadata["short"] = coalesce(short)
    metadata["long"] = coalesce(long)

    if not isinstance(cardinality := coalesce(metadata["cardinality"], Zero()), Cardinality):
        raise TypeError(f"{cls.__typename__} 'cardinality' must be a Cardinality")
    metadata["cardinality"] = cardinality


class ArgSpec(metaclass=ArgumentType, sealed=True):
    """
    A declared expectation: an option or a subcommand with an arity rule.

    Properties
    - name, short, long, kind, cardinality (read-only).

    Equality and hashing are by value over all five fields.
    """

    __slots__ = ("_name", "_short", "_long", "_kind", "_cardinality")

    __introspectable__ = (
        "name",
        "short",
        "long",
        "kind",
        "cardinality",
    )

    def __new__(
            cls,
            name,
            /,
            short=Unset,
            long=Unset,
            *,
            kind=Kind.OPTION,
            cardinality=Unset,
    ):
        """
        Construct an ArgSpec with sanitized metadata.

        Parameters
        - name: str
          Unique identifier, used as the key in parse results. For subcommands
          it is also the literal token that matches.
        - short: Unset | str
          Single character matched by "-<short>" (options only).
        - long: Unset | str
          Word matched by "--<long>" (options only).
        - kind: Kind
          Kind.OPTION (default) or Kind.SUBCOMMAND.
        - cardinality: Unset | Cardinality
          Parameter-count rule; Zero() when Unset.
        """
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "kind": kind,
            "cardinality": cardinality,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        return self

    @property
    def reachable(self):
        """
        Whether any token can ever match this spec.
        """
        return self._kind is Kind.SUBCOMMAND or self._short is not None or self._long is not None

    def __eq__(self, other, /):
        if not isinstance(other, ArgSpec):
            return NotImplemented
        return all(getattr(self, field) == getattr(other, field) for field in ArgSpec.__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, field) for field in ArgSpec.__introspectable__))

    def __str__(self):
        if self._kind is Kind.SUBCOMMAND:
            return f"subcommand {self._name!r}"
        forms = []
        if self._short is not None:
            forms.append("-" + self._short)
        if self._long is not None:
            forms.append("--" + self._long)
        if not forms:
            return f"option {self._name!r}"
        return f"option {self._name!r} ({', '.join(forms)})"


__all__ = (
    "Kind",
    "Cardinality",
    "Zero",
    "Exact",
    "More",
    "Less",
    "ArgSpec",
)
