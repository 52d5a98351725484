import logging
import tomllib
from pathlib import Path
from typing import Any

from glyphscope_analyzer import AnalyzerConfig, Capabilities, EstimatorGuard, ExecGuard
from glyphscope_ast import ConfigError
from glyphscope_risk import ProbeSettings

logger = logging.getLogger(__name__)


class GlyphScopeConfig:
    """Handles loading and validation of .glyphscope.toml configuration"""

    def __init__(self, config_path: Path | None = None):
        self.select: list[str] = []
        self.ignore: list[str] = []
        self.risk_detection: bool = True
        self.false_positive_negative: bool = True
        self.exec_guard: dict[str, Any] = {}
        self.estimator_guard: dict[str, Any] = {}
        self.probe: dict[str, Any] = {}

        if config_path and config_path.exists():
            self._load_from_file(config_path)

    def _load_from_file(self, path: Path):
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # Fallback to defaults if parsing fails
            logger.warning("Ignoring config file %s: %s", path, e)
            return

        section = data.get("tool", {}).get("glyphscope", {})
        self.select = _string_list(section.get("select", self.select), "select")
        self.ignore = _string_list(section.get("ignore", self.ignore), "ignore")
        self.risk_detection = _flag(section.get("risk_detection", self.risk_detection), "risk_detection")
        self.false_positive_negative = _flag(
            section.get("false_positive_negative", self.false_positive_negative),
            "false_positive_negative",
        )
        self.exec_guard = _table(section.get("exec", {}), "exec")
        self.estimator_guard = _table(section.get("estimator", {}), "estimator")
        self.probe = _table(section.get("probe", {}), "probe")
        logger.debug("Loaded config from %s", path)

    def to_analyzer_config(self) -> AnalyzerConfig:
        """Build the analyzer configuration; raises ``ConfigError`` on bad values"""
        return AnalyzerConfig(
            capabilities=Capabilities(
                risk_detection=self.risk_detection,
                false_positive_negative=self.false_positive_negative,
            ),
            exec_guard=_build(ExecGuard, self.exec_guard, "exec"),
            estimator_guard=_build(EstimatorGuard, self.estimator_guard, "estimator"),
            probe=_build(ProbeSettings, self.probe, "probe"),
            select=self.select or None,
            ignore=self.ignore or None,
        )


def _string_list(value: Any, key: str) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return value


def _flag(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false")
    return value


def _table(value: Any, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"[tool.glyphscope.{key}] must be a table")
    return value


def _build(cls, values: dict[str, Any], section: str):
    """Instantiate a settings dataclass, checking each value against its default's type."""
    defaults = cls()
    for key, value in values.items():
        if not hasattr(defaults, key):
            raise ConfigError(f"Unknown setting '{key}' in [tool.glyphscope.{section}]")
        expected = type(getattr(defaults, key))
        if expected is bool:
            _flag(value, f"{section}.{key}")
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"'{section}.{key}' must be a number")
        if value <= 0:
            raise ConfigError(f"'{section}.{key}' must be positive")
        if expected is int and not isinstance(value, int):
            raise ConfigError(f"'{section}.{key}' must be a whole number")
    return cls(**values)
