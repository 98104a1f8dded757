import logging
from pathlib import Path

import pytest

from geo_categorizer.core import settings
from geo_categorizer.logger import ColourizedFormatter, get_logging_config


def test_read_config_file(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "\n".join(
            [
                "# comment",
                "OPENAI_MODEL: gpt-4o-mini  # inline comment",
                'OPENAI_BASE_URL: "http://localhost:11434/v1"',
                "SUGGEST_MAX_STEPS: '4'",
                "EMPTY_VALUE:",
                "not a pair",
            ]
        ),
        encoding="utf-8",
    )

    values = settings.read_config_file(str(config))

    assert values == {
        "OPENAI_MODEL": "gpt-4o-mini",
        "OPENAI_BASE_URL": "http://localhost:11434/v1",
        "SUGGEST_MAX_STEPS": "4",
    }


def test_read_config_file_missing(tmp_path: Path) -> None:
    assert settings.read_config_file(str(tmp_path / "missing.yaml")) == {}
    assert settings.read_config_file(None) == {}


def test_load_environment_does_not_override_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "config.yaml").write_text(
        "SUGGEST_TEMPERATURE: 0.2\nNEARBY_RADIUS_METERS: 250\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("SUGGEST_TEMPERATURE", "0.9")
    monkeypatch.setenv("NEARBY_RADIUS_METERS", "0")
    monkeypatch.delenv("NEARBY_RADIUS_METERS")

    settings.load_environment()

    assert settings.get_temperature() == 0.9
    assert settings.get_radius_meters() == 250.0
    assert settings.is_env_override("SUGGEST_TEMPERATURE")
    assert not settings.is_env_override("NEARBY_RADIUS_METERS")


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 3), ("5", 5), ("abc", 3), ("0", 3)],
)
def test_max_steps_from_env(monkeypatch: pytest.MonkeyPatch, raw: str | None, expected: int) -> None:
    if raw is None:
        monkeypatch.delenv("SUGGEST_MAX_STEPS", raising=False)
    else:
        monkeypatch.setenv("SUGGEST_MAX_STEPS", raw)
    assert settings.get_max_steps() == expected


def test_invalid_float_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUGGEST_TEMPERATURE", "warm")
    assert settings.get_temperature() == settings.DEFAULT_TEMPERATURE


def test_mask_env_value() -> None:
    assert settings.mask_env_value("OPENAI_API_KEY", "sk-abcdef123456") == "sk...56"
    assert settings.mask_env_value("OPENAI_API_KEY", "abc") == "****"
    assert settings.mask_env_value("OPENAI_MODEL", "gpt-4o-mini") == "gpt-4o-mini"


def test_colourized_formatter_restores_levelname() -> None:
    formatter = ColourizedFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)

    output = formatter.format(record)

    assert "\x1b[33mWARNING" in output
    assert record.levelname == "WARNING"


def test_logging_config_adds_file_handler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    config = get_logging_config()
    assert config["handlers"]["file"]["filename"] == str(tmp_path / "geo-categorizer.log")
    assert "file" in config["loggers"][""]["handlers"]
