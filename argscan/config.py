"""
Argscan spec registry: chainable builder and frozen configuration.

What this module provides
- ConfigBuilder: an immutable-value builder. Every add_* step returns a new
  builder holding one more ArgSpec; the receiver is never modified, so partial
  builders can be shared and extended independently.
- Config: the finalized, ordered, read-only collection of ArgSpec consumed by
  the parser.

Validation
- Each ArgSpec validates its own metadata on construction (types, single
  character short forms, subcommands without short/long).
- Registry-level rules (unique names, options being reachable) are only checked
  by build(strict=True). A non-strict build accepts anything; duplicated names
  then share one result entry and unreachable options are never matched.

Quick example
    >>> from argscan import ConfigBuilder, Exact, More
    >>> config = (
    ...     ConfigBuilder()
    ...     .add_option("output", "o", "output", Exact(1))
    ...     .add_short_flag("verbose", "v")
    ...     .add_subcommand("build", More(0))
    ...     .build()
    ... )
    >>> [spec.name for spec in config.options]
    ['output', 'verbose']
"""
from collections.abc import Iterable

from .arguments import ArgSpec, Kind, Zero
from .utils import *


class ConfigBuilder:
    """
    Incremental, chainable declaration of argument specs.

    Each method returns a new ConfigBuilder; chain the calls and finish with
    build().
    """
    __slots__ = ("_specs",)

    def __init__(self, specs=(), /):
        if not isinstance(specs, Iterable):
            raise TypeError("ConfigBuilder() argument must be an iterable of arg-specs")
        specs = tuple(specs)
        for spec in specs:
            if not isinstance(spec, ArgSpec):
                raise TypeError("ConfigBuilder() argument must be an iterable of arg-specs")
        self._specs = specs

    specs = mirror("specs")

    def add(self, spec, /):
        """
        Return a new builder with `spec` appended.
        """
        if not isinstance(spec, ArgSpec):
            raise TypeError("add() argument must be an arg-spec")
        return type(self)(self._specs + (spec,))

    def add_short_option(self, name, short, cardinality, /):
        """Declare an option that only has a short form (-x)."""
        return self.add(ArgSpec(name, short, cardinality=cardinality))

    def add_long_option(self, name, long, cardinality, /):
        """Declare an option that only has a long form (--name)."""
        return self.add(ArgSpec(name, long=long, cardinality=cardinality))

    def add_option(self, name, short, long, cardinality, /):
        """Declare an option with both short and long forms."""
        return self.add(ArgSpec(name, short, long, cardinality=cardinality))

    def add_short_flag(self, name, short, /):
        """Declare a parameterless option that only has a short form."""
        return self.add(ArgSpec(name, short, cardinality=Zero()))

    def add_long_flag(self, name, long, /):
        """Declare a parameterless option that only has a long form."""
        return self.add(ArgSpec(name, long=long, cardinality=Zero()))

    def add_flag(self, name, short, long, /):
        """Declare a parameterless option with both short and long forms."""
        return self.add(ArgSpec(name, short, long, cardinality=Zero()))

    def add_subcommand(self, name, cardinality=Unset, /):
        """Declare a subcommand, matched by a bare token equal to `name`."""
        return self.add(ArgSpec(name, kind=Kind.SUBCOMMAND, cardinality=coalesce(cardinality, Zero())))

    def build(self, *, strict=False):
        """
        Finalize the declared specs into a Config.

        Parameters
        - strict: bool (keyword-only)
          When True, reject duplicated names (ValueError) and options without
          any short or long form (TypeError).
        """
        if strict:
            names = set()
            for spec in self._specs:
                if spec.name in names:
                    raise ValueError(f"arg-spec name {spec.name!r} is declared more than once")
                if not spec.reachable:
                    raise TypeError(f"{spec} must specify at least a short or a long form")
                names.add(spec.name)
        return Config(self._specs)

    def __len__(self):
        return len(self._specs)

    def __repr__(self):
        return f"ConfigBuilder({list(self._specs)!r})"


class Config:
    """
    Ordered, read-only collection of ArgSpec.

    Iterating yields specs in declaration order. `options` and `subcommands`
    are order-preserving partitions by kind.
    """
    __slots__ = ("_specs",)

    def __init__(self, specs=(), /):
        specs = tuple(specs)
        for spec in specs:
            if not isinstance(spec, ArgSpec):
                raise TypeError("Config() argument must be an iterable of arg-specs")
        self._specs = specs

    specs = mirror("specs")

    @property
    def options(self):
        return tuple(spec for spec in self._specs if spec.kind is Kind.OPTION)

    @property
    def subcommands(self):
        return tuple(spec for spec in self._specs if spec.kind is Kind.SUBCOMMAND)

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __contains__(self, spec, /):
        return spec in self._specs

    def __eq__(self, other, /):
        if not isinstance(other, Config):
            return NotImplemented
        return self._specs == other._specs

    def __hash__(self):
        return hash(self._specs)

    def __repr__(self):
        return f"Config({list(self._specs)!r})"

    def __rich_repr__(self):
        yield from self._specs


__all__ = (
    "ConfigBuilder",
    "Config",
)
