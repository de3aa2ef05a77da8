"""
Runtime configuration.

All tunables in one place, grouped by concern. Nothing in the core reads
this module on its own: a GentzenConfig (or one of its sections) is handed
to whatever needs it.

    cfg = GentzenConfig.for_environment("production")
    cfg = GentzenConfig.from_env()          # GENTZEN_ENV + GENTZEN_* overrides
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .core.exceptions import ConfigError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
ENVIRONMENTS = ("development", "test", "production")


@dataclass
class LoggingConfig:
    level: str              = "INFO"
    enable_timestamps: bool = True
    enable_labels: bool     = True


@dataclass
class ReasoningConfig:
    max_proof_depth: int = 5      # BFS rounds per target
    max_iterations: int  = 1000   # dequeues before giving up
    max_queue_size: int  = 1000   # live queue ceiling
    max_steps: int       = 100    # a state this long yields no successors


@dataclass
class ValidationConfig:
    strict_mode: bool              = False   # validation errors stop the run
    warn_on_invalid_formulas: bool = True    # style warnings log at WARNING, else DEBUG


@dataclass
class DisplayConfig:
    max_display_items: int  = 100
    truncate_formulas: bool = False
    max_formula_length: int = 200


# (section, field) -> inclusive range
_RANGES = {
    ("reasoning", "max_proof_depth"): (1, 20),
    ("reasoning", "max_iterations"): (10, 100_000),
    ("reasoning", "max_queue_size"): (10, 100_000),
    ("reasoning", "max_steps"): (1, 10_000),
    ("display", "max_display_items"): (1, 10_000),
    ("display", "max_formula_length"): (10, 10_000),
}

_ENV_OVERRIDES = {
    "GENTZEN_LOG_LEVEL": ("logging", "level", str),
    "GENTZEN_MAX_PROOF_DEPTH": ("reasoning", "max_proof_depth", int),
    "GENTZEN_MAX_ITERATIONS": ("reasoning", "max_iterations", int),
    "GENTZEN_MAX_QUEUE_SIZE": ("reasoning", "max_queue_size", int),
    "GENTZEN_MAX_STEPS": ("reasoning", "max_steps", int),
}


@dataclass
class GentzenConfig:
    environment: str             = "development"
    logging: LoggingConfig       = field(default_factory=LoggingConfig)
    reasoning: ReasoningConfig   = field(default_factory=ReasoningConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    display: DisplayConfig       = field(default_factory=DisplayConfig)

    @classmethod
    def for_environment(cls, environment: str) -> "GentzenConfig":
        """Pre-tuned configs per environment."""
        if environment not in ENVIRONMENTS:
            raise ConfigError(
                f"Unknown environment {environment!r}; expected one of {ENVIRONMENTS}",
                "environment",
            )
        cfg = cls(environment=environment)
        if environment == "development":
            cfg.logging.level = "DEBUG"
            cfg.validation.strict_mode = True
        elif environment == "test":
            cfg.logging.level = "WARNING"
            cfg.logging.enable_timestamps = False
        elif environment == "production":
            cfg.logging.level = "INFO"
            cfg.reasoning.max_proof_depth = 3
            cfg.validation.strict_mode = True
        return cfg

    @classmethod
    def from_env(cls, environ: Optional[Mapping] = None) -> "GentzenConfig":
        """Environment preset from GENTZEN_ENV, then per-field overrides."""
        environ = os.environ if environ is None else environ
        cfg = cls.for_environment(environ.get("GENTZEN_ENV", "development"))
        for var, (section, key, convert) in _ENV_OVERRIDES.items():
            if var not in environ:
                continue
            raw = environ[var]
            try:
                value = convert(raw)
            except ValueError:
                raise ConfigError(f"{var}={raw!r} is not a valid {convert.__name__}",
                                  f"{section}.{key}") from None
            if section == "logging":
                value = value.upper()
            setattr(cfg.get_section(section), key, value)
        cfg.validate()
        return cfg

    def get_section(self, name: str):
        if name not in ("logging", "reasoning", "validation", "display"):
            raise ConfigError(f"Unknown configuration section {name!r}", name)
        return getattr(self, name)

    def validate(self) -> "GentzenConfig":
        """Raise ConfigError on the first out-of-range value."""
        if self.logging.level not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level {self.logging.level!r}; expected one of {LOG_LEVELS}",
                "logging.level",
            )
        for (section, key), (low, high) in _RANGES.items():
            value = getattr(self.get_section(section), key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{section}.{key} must be an integer, got {value!r}",
                                  f"{section}.{key}")
            if not low <= value <= high:
                raise ConfigError(f"{section}.{key}={value} outside [{low}, {high}]",
                                  f"{section}.{key}")
        return self


def configure_logging(cfg: LoggingConfig) -> None:
    """Install a root handler for the CLI. Library code only calls getLogger."""
    parts = []
    if cfg.enable_timestamps:
        parts.append("%(asctime)s")
    if cfg.enable_labels:
        parts.append("%(levelname)s")
    parts.append("%(name)s: %(message)s")
    logging.basicConfig(level=getattr(logging, cfg.level), format=" ".join(parts))
