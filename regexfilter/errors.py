"""Error hierarchy — everything here is raised before the first record is read."""


class RegexFilterError(Exception):
    """Base class for all setup failures."""


class ConfigurationError(RegexFilterError):
    """The invocation itself is malformed."""


class ResourceError(RegexFilterError):
    """A pattern or file named by the invocation cannot be used."""


class UnknownOptionError(ConfigurationError):
    def __init__(self, option: str):
        self.option = option
        super().__init__(f"unrecognized option: {option!r}")


class MissingArgumentError(ConfigurationError):
    def __init__(self, option: str, argument: str):
        self.option = option
        self.argument = argument
        super().__init__(f"option {option!r} is missing its <{argument}> argument")


class DuplicateOptionError(ConfigurationError):
    def __init__(self, option: str):
        self.option = option
        super().__init__(f"option {option!r} may only be given once")


class NoFiltersError(ConfigurationError):
    def __init__(self):
        super().__init__("at least one 'match <pattern> <file>' filter is required")


class RulesFileError(ConfigurationError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid rules file {path!r}: {reason}")


class PatternCompileError(ResourceError):
    def __init__(self, position: int, pattern: str, reason: str):
        self.position = position
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            f"filter #{position}: cannot compile pattern {pattern!r}: {reason}"
        )


class DestinationOpenError(ResourceError):
    """Raised when an output file cannot be opened.

    ``position`` is the 1-based filter position, or None for the remainder.
    """

    def __init__(self, position: int | None, target: str, reason: str):
        self.position = position
        self.target = target
        self.reason = reason
        where = f"filter #{position}" if position is not None else "remainder"
        super().__init__(f"{where}: cannot open {target!r} for writing: {reason}")


class SourceOpenError(ResourceError):
    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"infile: cannot open {target!r} for reading: {reason}")
