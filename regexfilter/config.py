"""Configuration loading from environment variables and an optional YAML rules file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from regexfilter.errors import RulesFileError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    flush_each_record: bool = False


def load_settings() -> Settings:
    """Build Settings from environment variables with quiet defaults."""
    raw_level = os.environ.get("REGEXFILTER_LOG_LEVEL", Settings.log_level)
    log_level = raw_level.strip().upper()
    if log_level not in LOG_LEVELS:
        logger.warning(
            "Unknown REGEXFILTER_LOG_LEVEL %r, using %s", raw_level, Settings.log_level
        )
        log_level = Settings.log_level
    return Settings(
        log_level=log_level,
        flush_each_record=_parse_bool(
            os.environ.get("REGEXFILTER_FLUSH_EACH_RECORD", "false")
        ),
    )


@dataclass(frozen=True)
class FilterRule:
    pattern: str  # regex
    file: str


@dataclass(frozen=True)
class RuleSet:
    filters: list[FilterRule] = field(default_factory=list)
    input: str | None = None
    remainder_file: str | None = None
    remainder_discard: bool = False


def _parse_remainder(path: str, value) -> tuple[str | None, bool]:
    if value is None:
        return None, False
    if value == "discard":
        return None, True
    if isinstance(value, dict) and set(value) == {"file"} and isinstance(value["file"], str):
        return value["file"], False
    raise RulesFileError(path, "'remainder' must be 'discard' or a mapping {file: <path>}")


def parse_rules(path: str, data) -> RuleSet:
    """Validate the structure of an already-parsed rules document."""
    if data is None:
        return RuleSet()
    if not isinstance(data, dict):
        raise RulesFileError(path, "top level must be a mapping")

    unknown = set(data) - {"filters", "input", "remainder"}
    if unknown:
        raise RulesFileError(path, f"unknown keys: {', '.join(sorted(unknown))}")

    raw_filters = data.get("filters") or []
    if not isinstance(raw_filters, list):
        raise RulesFileError(path, "'filters' must be a list")

    filters = []
    for index, rule in enumerate(raw_filters, start=1):
        if (
            not isinstance(rule, dict)
            or not isinstance(rule.get("pattern"), str)
            or not isinstance(rule.get("file"), str)
        ):
            raise RulesFileError(path, f"filter #{index} needs string 'pattern' and 'file' keys")
        filters.append(FilterRule(pattern=rule["pattern"], file=rule["file"]))

    input_path = data.get("input")
    if input_path is not None and not isinstance(input_path, str):
        raise RulesFileError(path, "'input' must be a path string")

    remainder_file, remainder_discard = _parse_remainder(path, data.get("remainder"))
    return RuleSet(
        filters=filters,
        input=input_path,
        remainder_file=remainder_file,
        remainder_discard=remainder_discard,
    )


def load_rules_file(path: str) -> RuleSet:
    """Load filters, input and remainder from a YAML rules file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise RulesFileError(path, exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise RulesFileError(path, str(exc)) from exc

    rules = parse_rules(path, data)
    logger.info("Loaded %d filter rule(s) from %s", len(rules.filters), path)
    return rules
