"""
Argscan faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse error.
- ParseException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, actionable way.
- UnknownOptionError, UnknownSubcommandError, ArityViolationError,
  EmptyInvocationError: the error taxonomy of the parser.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Rendering
- Outside shell mode, triggering a fault raises it.
- In shell mode, the fault is printed on stderr with rich and the process
  exits with status 1.
- Host hooks read from __main__: __prog__ (program label), __styles__ (style
  overrides), __codes__ (code relabeling), __docs__ (per-code documentation).

Options carried by faults
- code, title, hint: presentation (set by the raiser).
- token, index, spec, expected, actual, suggestions: context (when relevant).
- program, shell, fancy, colorful: runtime flags (merged by trigger()).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - routing (1110x): EMPTY_INVOCATION, UNKNOWN_SUBCOMMAND
    - switches (1111x): UNKNOWN_OPTION
    - parameters (1112x): ARITY_VIOLATION

    normalize() lets the host remap codes to custom labels.
    """
    # --- routing errors (11xxx) ---
    EMPTY_INVOCATION            = 11101
    UNKNOWN_SUBCOMMAND          = 11102

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112

    # --- parameter errors (11xxx) ---
    ARITY_VIOLATION             = 11122

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseException(Exception):
    """
    base of every parse error.

    `message` is the one-sentence description; `options` is a read-only
    mapping with presentation and context entries (see module docstring).
    """
    code = Unset
    title = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code, "title": type(self).title} | options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __getattr__(self, name):
        # context entries (token, spec, expected, ...) read as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("program", "argscan")), styler("prog-name"))

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "", styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))

        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if isinstance(code, FaultCode) and (docs := getdoc(code)):
            parts.append(text(docs))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(ParseException):
    """an option-shaped token matched no declared short or long form."""
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class UnknownSubcommandError(ParseException):
    """a bare token matched no declared subcommand (strict positionals only)."""
    code = FaultCode.UNKNOWN_SUBCOMMAND
    title = "unknown subcommand"


class ArityViolationError(ParseException):
    """a cardinality rule could not be satisfied."""
    code = FaultCode.ARITY_VIOLATION
    title = "wrong number of parameters"


class EmptyInvocationError(ParseException):
    """the token source did not even provide a program name."""
    code = FaultCode.EMPTY_INVOCATION
    title = "empty invocation"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via copy.replace(fault, **options).
    - in shell mode, rendering happens via the rich console and the process
      exits; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseException",
    "UnknownOptionError",
    "UnknownSubcommandError",
    "ArityViolationError",
    "EmptyInvocationError",
    "FaultCode",
    "trigger",
    "getdoc",
)
