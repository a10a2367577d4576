"""Option-token parsing — an explicit cursor and one parsing function per option kind.

Grammar (options may appear in any order; each consumes its own arguments):

    match <pattern> <file>      (alias m)  repeatable, order significant
    infile <file>               (alias i)  at most once
    remainder file <file>       (alias r)  at most once
    remainder discard

Tokens are read into ParsedOption values first, with no side effects, and
only then applied to a ConfigBuilder, which opens files.
"""

from dataclasses import dataclass
from typing import Callable, Iterable

from regexfilter.builder import ConfigBuilder
from regexfilter.config import RuleSet
from regexfilter.errors import MissingArgumentError, NoFiltersError, UnknownOptionError
from regexfilter.models import OptionKind, RemainderMode


class TokenCursor:
    """Read position over a fixed list of argument tokens."""

    def __init__(self, tokens: Iterable[str]):
        self._tokens = tuple(tokens)
        self._index = 0

    def at_end(self) -> bool:
        return self._index >= len(self._tokens)

    def next(self) -> str | None:
        """Consume and return the next token, or None when exhausted."""
        if self.at_end():
            return None
        token = self._tokens[self._index]
        self._index += 1
        return token

    def take(self, option: str, argument: str) -> str:
        """Consume the next token as *argument* of *option*, which requires it."""
        token = self.next()
        if token is None:
            raise MissingArgumentError(option, argument)
        return token


@dataclass(frozen=True)
class ParsedOption:
    kind: OptionKind
    arguments: tuple[str, ...]


def option_kind(token: str) -> OptionKind:
    """Resolve an option name or alias."""
    for kind in OptionKind:
        if token in kind.value:
            return kind
    raise UnknownOptionError(token)


def _read_match(cursor: TokenCursor) -> tuple[str, ...]:
    name = OptionKind.MATCH.option_name
    return cursor.take(name, "pattern"), cursor.take(name, "file")


def _read_infile(cursor: TokenCursor) -> tuple[str, ...]:
    return (cursor.take(OptionKind.INFILE.option_name, "file"),)


def _read_remainder(cursor: TokenCursor) -> tuple[str, ...]:
    name = OptionKind.REMAINDER.option_name
    mode = cursor.take(name, "file|discard")
    if mode == RemainderMode.DISCARD.value:
        return (mode,)
    if mode == RemainderMode.FILE.value:
        return mode, cursor.take(f"{name} {mode}", "file")
    raise UnknownOptionError(f"{name} {mode}")


OPTION_READERS: dict[OptionKind, Callable[[TokenCursor], tuple[str, ...]]] = {
    OptionKind.MATCH: _read_match,
    OptionKind.INFILE: _read_infile,
    OptionKind.REMAINDER: _read_remainder,
}


def read_options(tokens: Iterable[str]) -> list[ParsedOption]:
    """Split *tokens* into options, stopping at the first malformed one."""
    cursor = TokenCursor(tokens)
    options = []
    while not cursor.at_end():
        kind = option_kind(cursor.next())
        options.append(ParsedOption(kind, OPTION_READERS[kind](cursor)))
    return options


def apply_option(option: ParsedOption, builder: ConfigBuilder) -> None:
    if option.kind is OptionKind.MATCH:
        builder.add_filter(*option.arguments)
    elif option.kind is OptionKind.INFILE:
        builder.set_input(option.arguments[0])
    elif option.arguments[0] == RemainderMode.DISCARD.value:
        builder.set_remainder(RemainderMode.DISCARD)
    else:
        builder.set_remainder(RemainderMode.FILE, option.arguments[1])


def require_filters(options: list[ParsedOption], rules: RuleSet | None = None) -> None:
    """Reject a run with no filters before any file is opened."""
    if rules is not None and rules.filters:
        return
    if not any(option.kind is OptionKind.MATCH for option in options):
        raise NoFiltersError()


def apply_rules(rules: RuleSet, builder: ConfigBuilder) -> None:
    """Apply a loaded rules file to *builder*; its filters come first."""
    for rule in rules.filters:
        builder.add_filter(rule.pattern, rule.file)
    if rules.input is not None:
        builder.set_input(rules.input)
    if rules.remainder_discard:
        builder.set_remainder(RemainderMode.DISCARD)
    elif rules.remainder_file is not None:
        builder.set_remainder(RemainderMode.FILE, rules.remainder_file)
