from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from strictbool.options import DEFAULT_OPTIONS, OptionsError, validate_options

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "strictbool.yaml"
RULE_KEY = "strict-boolean-conditions"


class ConfigError(ValueError):
    def __init__(self, message: str, path: Path | None = None):
        location = f"{path}: " if path is not None else ""
        super().__init__(f"{location}{message}")
        self.message = message
        self.path = path


@dataclass(frozen=True)
class LintConfig:
    rule_options: tuple[str, ...] | None = None

    def effective_options(self) -> tuple[str, ...]:
        return DEFAULT_OPTIONS if self.rule_options is None else self.rule_options


def config_from_data(raw: object, *, path: Path | None = None) -> LintConfig:
    if raw is None:
        return LintConfig()
    if not isinstance(raw, dict):
        raise ConfigError("config must be a mapping", path)

    rules = raw.get("rules")
    if rules is None:
        return LintConfig()
    if not isinstance(rules, dict):
        raise ConfigError("'rules' must be a mapping", path)

    unknown = sorted(str(name) for name in rules if name != RULE_KEY)
    if unknown:
        raise ConfigError(f"unknown rule(s): {', '.join(unknown)}", path)

    rule_options = rules.get(RULE_KEY)
    if rule_options is None:
        return LintConfig()

    try:
        names = validate_options(rule_options)
    except OptionsError as error:
        raise ConfigError(f"rules.{RULE_KEY}: {error.message}", path) from error
    return LintConfig(rule_options=tuple(names))


def load_config(path: Path | str) -> LintConfig:
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as error:
        raise ConfigError(f"cannot read config: {error.strerror}", config_path) from error

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise ConfigError(f"invalid YAML: {error}", config_path) from error

    config = config_from_data(raw, path=config_path)
    logger.info("loaded config %s: options=%s", config_path, list(config.effective_options()))
    return config


def find_config(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None
