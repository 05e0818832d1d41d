"""
Argscan parser: single-pass classification and parameter consumption.

What this module provides
- classify(token, options, subcommands): known option, known subcommand, or None.
- consume(spec, cursor, params, options, subcommands): cardinality-driven
  capture of the tokens following a matched spec.
- parse(config, tokens, program): the driver; returns a ParsedArgs or raises
  the first fault encountered.
- parse_args(config, argv): process adapter; splits off the program name and
  surfaces faults (raised, or rendered in shell mode).
- TokenCursor: explicit index over the token list with one-token lookahead.
- ParsedArgs: dict of spec name (and program name) to captured parameters.

Token classification
- "--name"  → option whose long form is "name".
- "-x..."   → option whose short form is "x" (only the first character after
  the dash is looked at; "-" alone matches nothing).
- anything else → subcommand whose name equals the token, or a positional.

Cardinality rules
- Zero():   nothing is consumed.
- Exact(n): n tokens are taken unconditionally; running out, or taking a token
  that is itself a known option/subcommand, is an arity violation.
- More(n):  tokens are taken while the next one is not a known option or
  subcommand; fewer than n + 1 is an arity violation.
- Less(n):  at most n - 1 tokens are taken, stopping early at a known option
  or subcommand; never fails.

Faults
- UnknownOptionError: option-shaped token matching nothing.
- UnknownSubcommandError: bare unmatched token, only when positionals=False.
- ArityViolationError: see the rules above.
- EmptyInvocationError: parse_args got no tokens at all.
Every fault aborts the whole parse; no partial result is returned.
"""
import difflib
import logging
import os.path
import shlex
import sys
from collections.abc import Iterable

from .arguments import ArgSpec, Kind, Zero, Exact, More, Less
from .config import Config
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class TokenCursor:
    """
    Read-once cursor over a materialized token sequence.

    - peek(): the next token without consuming it, or None at the end.
    - next(): consume and return the next token, or None at the end.
    - index: number of tokens consumed so far (also the 1-based position of
      the last consumed token).
    """
    __slots__ = ("_tokens", "_index")

    def __init__(self, tokens, /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("TokenCursor() argument must be an iterable of strings")
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("TokenCursor() argument must be an iterable of strings")
        self._tokens = tokens
        self._index = 0

    tokens = mirror("tokens")
    index = mirror("index")

    def peek(self):
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def next(self):
        token = self.peek()
        if token is not None:
            self._index += 1
        return token

    def __bool__(self):
        return self._index < len(self._tokens)

    def __len__(self):
        return len(self._tokens) - self._index

    def __repr__(self):
        return f"TokenCursor({list(self._tokens)!r}, index={self._index})"


class ParsedArgs(dict):
    """
    Parse result: spec name → None (never seen) or list of captured parameters.

    The program-name key always maps to a list collecting the tokens that
    matched neither an option nor a subcommand, in encountered order.

    appeared(name) and parameters(name) query a single entry; both tolerate
    names that were never declared.
    """
    __slots__ = ("_program",)

    def __init__(self, specs, program, /):
        super().__init__((spec.name, None) for spec in specs)
        # written last: a spec named like the program shares the bucket
        self[program] = []
        self._program = program

    @property
    def program(self):
        return self._program

    @property
    def positionals(self):
        return self[self._program]

    def appeared(self, name, /):
        """True when `name` was matched at least once (or is the program key)."""
        return self.get(name) is not None

    def parameters(self, name, /):
        """
        Parameters captured for `name`: None when it never appeared or was
        never declared, otherwise the list itself (possibly empty).
        """
        return self.get(name)

    def __repr__(self):
        return f"ParsedArgs({dict.__repr__(self)})"

    def __rich_repr__(self):
        yield from self.items()


def classify(token, options, subcommands, /):
    """
    Find the spec a raw token denotes.

    Parameters
    - token: str
      raw token from the stream.
    - options, subcommands: Sequence[ArgSpec]
      the option-kind and subcommand-kind specs, in declaration order.

    Returns
    - the first matching ArgSpec, or None. Whether None means "unknown option"
      or "positional" depends on the token shape and is decided by the caller.
    """
    if token.startswith("--"):
        long = token[2:]
        return next((option for option in options if option.long is not None and option.long == long), None)
    if token.startswith("-"):
        if len(token) < 2:
            return None
        short = token[1]
        return next((option for option in options if option.short == short), None)
    return next((subcommand for subcommand in subcommands if subcommand.name == token), None)


def consume(spec, cursor, params, options, subcommands, /):
    """
    Capture the parameters of a matched spec according to its cardinality.

    Tokens are appended to `params` left to right; the cursor only moves
    forward. Raises ArityViolationError when the rule cannot be satisfied.
    """

    def recognized(token):
        return classify(token, options, subcommands) is not None

    match spec.cardinality:
        case Zero():
            pass
        case Exact(count):
            for taken in range(count):
                token = cursor.next()
                if token is None or recognized(token):
                    logger.debug("%s ran short after %d of %d parameters", spec, taken, count)
                    raise ArityViolationError(
                        "there are only %s to supply %s with instead of %d" % (
                            pluralize(taken, "parameter"), spec, count
                        ),
                        hint="pass exactly %s after %s" % (pluralize(count, "parameter"), spec),
                        spec=spec,
                        expected=count,
                        actual=taken,
                        token=token,
                        index=cursor.index,
                    )
                params.append(token)
        case More(count):
            taken = 0
            while (token := cursor.peek()) is not None and not recognized(token):
                params.append(cursor.next())
                taken += 1
            if taken <= count:
                logger.debug("%s took %d parameters, needs more than %d", spec, taken, count)
                raise ArityViolationError(
                    "%s expected at least %s but got %d" % (spec, pluralize(count + 1, "parameter"), taken),
                    hint="pass at least %s after %s" % (pluralize(count + 1, "parameter"), spec),
                    spec=spec,
                    expected=count + 1,
                    actual=taken,
                    index=cursor.index,
                )
        case Less(count):
            for _ in range(count - 1):
                if (token := cursor.peek()) is None or recognized(token):
                    break
                params.append(cursor.next())
        case cardinality:
            raise TypeError(f"unsupported cardinality {cardinality!r}")


def _specs(config):
    if isinstance(config, Config):
        return tuple(config)
    if not isinstance(config, Iterable):
        raise TypeError("parse() first argument must be a config or an iterable of arg-specs")
    specs = tuple(config)
    for spec in specs:
        if not isinstance(spec, ArgSpec):
            raise TypeError("parse() first argument must be a config or an iterable of arg-specs")
    return specs


def parse(config, tokens, program, /, *, positionals=True):
    """
    Run the single pass over `tokens` and return the captured parameters.

    Parameters
    - config: Config | Iterable[ArgSpec]
      declared specs; names are assumed unique.
    - tokens: Iterable[str]
      invocation tokens, without the program name.
    - program: str
      key of the positional bucket in the result.
    - positionals: bool (keyword-only)
      when False, a bare token matching no subcommand raises
      UnknownSubcommandError instead of landing in the bucket.

    Returns
    - ParsedArgs with None for every spec that never appeared.

    Raises
    - UnknownOptionError, UnknownSubcommandError, ArityViolationError.
    """
    if not isinstance(program, str):
        raise TypeError("parse() third argument must be a string")

    specs = _specs(config)
    options = tuple(spec for spec in specs if spec.kind is Kind.OPTION)
    subcommands = tuple(spec for spec in specs if spec.kind is Kind.SUBCOMMAND)

    result = ParsedArgs(specs, program)
    cursor = TokenCursor(tokens)

    while (token := cursor.next()) is not None:
        index = cursor.index
        spec = classify(token, options, subcommands)

        if spec is None:
            if token.startswith("-"):
                spellings = [f"-{option.short}" for option in options if option.short is not None]
                spellings += [f"--{option.long}" for option in options if option.long is not None]
                suggestions = difflib.get_close_matches(token, spellings, 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "declared options are: %s" % (", ".join(spellings) or "none")
                logger.debug("unknown option %r at %s position", token, ordinal(index))
                raise UnknownOptionError(
                    "unknown option %r at %s position" % (token, ordinal(index)),
                    hint=hint,
                    token=token,
                    index=index,
                    suggestions=suggestions,
                )
            if not positionals:
                suggestions = difflib.get_close_matches(token, [subcommand.name for subcommand in subcommands], 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "declared subcommands are: %s" % (
                        ", ".join(subcommand.name for subcommand in subcommands) or "none"
                    )
                logger.debug("unknown subcommand %r at %s position", token, ordinal(index))
                raise UnknownSubcommandError(
                    "unknown subcommand %r at %s position" % (token, ordinal(index)),
                    hint=hint,
                    token=token,
                    index=index,
                    suggestions=suggestions,
                )
            result.positionals.append(token)
            continue

        logger.debug("matched %s at %s position", spec, ordinal(index))
        if (params := result.get(spec.name)) is None:
            params = result[spec.name] = []
        consume(spec, cursor, params, options, subcommands)

    return result


def parse_args(config, argv=Unset, /, *, positionals=True, shell=False, fancy=False, colorful=True):
    """
    Parse process-style arguments, where the first token is the program name.

    Parameters
    - config: Config | Iterable[ArgSpec]
    - argv:
      • Unset: read sys.argv.
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: used as-is (each element must be a string).
    - positionals: forwarded to parse().
    - shell, fancy, colorful: fault presentation. In shell mode faults are
      printed on stderr and the process exits with status 1; otherwise they
      are raised.

    Raises
    - TypeError: argv is neither a string nor an iterable of strings.
    - EmptyInvocationError: argv holds no token at all.
    - any fault raised by parse().
    """
    if argv is Unset:
        tokens = list(sys.argv)
    elif isinstance(argv, str):
        tokens = shlex.split(argv)
    elif isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse_args() argument must be a string or an iterable of strings")
    else:
        raise TypeError("parse_args() argument must be a string or an iterable of strings")

    program = os.path.basename(tokens[0]) if tokens else "argscan"

    try:
        if not tokens:
            raise EmptyInvocationError(
                "there were no command line arguments, not even a program name",
                hint="invoke the program through a shell or pass the program name first",
            )
        return parse(config, tokens[1:], tokens[0], positionals=positionals)
    except ParseException as fault:
        trigger(fault, program=program, shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "TokenCursor",
    "ParsedArgs",
    "classify",
    "consume",
    "parse",
    "parse_args",
)
