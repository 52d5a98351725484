import logging

import pytest
from glyphscope_ast import ConfigError
from glyphscope_cli.config import GlyphScopeConfig


def _write(tmp_path, text: str):
    path = tmp_path / ".glyphscope.toml"
    path.write_text(text)
    return path


def test_missing_file_uses_defaults(tmp_path):
    config = GlyphScopeConfig(tmp_path / "missing.toml").to_analyzer_config()
    assert config.capabilities.risk_detection
    assert config.capabilities.false_positive_negative
    assert config.exec_guard.max_matches == 500
    assert config.probe.enabled
    assert config.select is None and config.ignore is None


def test_loads_settings(tmp_path):
    path = _write(
        tmp_path,
        """
[tool.glyphscope]
select = ["RISK_NESTED", "RISK_POTENTIAL"]
ignore = "RISK_LOOKAROUND"
false_positive_negative = false

[tool.glyphscope.exec]
max_matches = 20

[tool.glyphscope.estimator]
max_total_work = 100

[tool.glyphscope.probe]
enabled = false
threshold_ms = 12.5
""",
    )
    config = GlyphScopeConfig(path).to_analyzer_config()
    assert config.select == ["RISK_NESTED", "RISK_POTENTIAL"]
    assert config.ignore == ["RISK_LOOKAROUND"]
    assert not config.capabilities.false_positive_negative
    assert config.capabilities.risk_detection
    assert config.exec_guard.max_matches == 20
    assert config.exec_guard.max_sample_chars == 50_000
    assert config.estimator_guard.max_total_work == 100
    assert not config.probe.enabled
    assert config.probe.threshold_ms == 12.5


def test_other_tool_sections_are_ignored(tmp_path):
    path = _write(tmp_path, "[tool.other]\nselect = 3\n")
    assert GlyphScopeConfig(path).select == []


def test_invalid_toml_falls_back_to_defaults(tmp_path, caplog):
    path = _write(tmp_path, "[tool.glyphscope\nselect = ")
    with caplog.at_level(logging.WARNING):
        config = GlyphScopeConfig(path)
    assert config.select == []
    assert "Ignoring config file" in caplog.text


@pytest.mark.parametrize(
    "text, message",
    [
        ("[tool.glyphscope]\nselect = 5\n", "'select' must be a list of strings"),
        ("[tool.glyphscope]\nrisk_detection = 'yes'\n", "'risk_detection' must be true or false"),
        ("[tool.glyphscope]\nexec = 3\n", "[tool.glyphscope.exec] must be a table"),
    ],
)
def test_invalid_values_on_load(tmp_path, text, message):
    with pytest.raises(ConfigError) as exc_info:
        GlyphScopeConfig(_write(tmp_path, text))
    assert str(exc_info.value) == message


@pytest.mark.parametrize(
    "text, message",
    [
        ("[tool.glyphscope.exec]\nmax_lines = 3\n", "Unknown setting 'max_lines' in [tool.glyphscope.exec]"),
        ("[tool.glyphscope.exec]\nmax_matches = 0\n", "'exec.max_matches' must be positive"),
        ("[tool.glyphscope.exec]\nmax_matches = 2.5\n", "'exec.max_matches' must be a whole number"),
        ("[tool.glyphscope.estimator]\nmax_total_work = true\n", "'estimator.max_total_work' must be a number"),
        ("[tool.glyphscope.probe]\nenabled = 1\n", "'probe.enabled' must be true or false"),
    ],
)
def test_invalid_values_on_build(tmp_path, text, message):
    config = GlyphScopeConfig(_write(tmp_path, text))
    with pytest.raises(ConfigError) as exc_info:
        config.to_analyzer_config()
    assert str(exc_info.value) == message
