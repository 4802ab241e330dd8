"""Tests for render config loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from fluentcheck.config import (
    CONFIG_ENV_VAR,
    RenderConfig,
    configure,
    get_config,
    load_config,
    set_config,
)


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "fluentcheck.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_defaults():
    cfg = RenderConfig()
    assert cfg.use_colors is True
    assert cfg.use_unicode_symbols is True
    assert cfg.show_success_details is True
    assert cfg.enhanced_output is False


def test_load_config(tmp_yaml):
    path = tmp_yaml("""\
        use_colors: false
        enhanced_output: true
    """)
    cfg = load_config(path)
    assert cfg.use_colors is False
    assert cfg.enhanced_output is True
    assert cfg.use_unicode_symbols is True


def test_load_empty_config_gives_defaults(tmp_yaml):
    assert load_config(tmp_yaml("")) == RenderConfig()


def test_unknown_keys_rejected(tmp_yaml):
    path = tmp_yaml("""\
        use_colours: false
    """)
    with pytest.raises(ValidationError):
        load_config(path)


def test_config_is_frozen():
    with pytest.raises(ValidationError):
        RenderConfig().use_colors = False


def test_env_expansion(monkeypatch, tmp_yaml):
    monkeypatch.setenv("FC_COLORS", "false")
    monkeypatch.delenv("FC_ENHANCED", raising=False)
    path = tmp_yaml("""\
        use_colors: ${FC_COLORS}
        enhanced_output: ${FC_ENHANCED:-true}
    """)
    cfg = load_config(path)
    assert cfg.use_colors is False
    assert cfg.enhanced_output is True


def test_env_expansion_lists_missing_vars(monkeypatch):
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.delenv("MISSING_B", raising=False)
    with pytest.raises(ValidationError) as excinfo:
        RenderConfig(use_colors="${MISSING_A}", enhanced_output="${MISSING_B}")
    message = str(excinfo.value)
    assert "MISSING_A" in message
    assert "MISSING_B" in message


# --- process-wide config ---


def test_get_config_loads_from_env_var(monkeypatch, tmp_yaml):
    path = tmp_yaml("""\
        use_unicode_symbols: false
    """)
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    set_config(None)
    assert get_config().use_unicode_symbols is False
    # cached after the first load
    assert get_config() is get_config()


def test_get_config_defaults_without_env_var(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    set_config(None)
    assert get_config() == RenderConfig()


def test_broken_config_file_does_not_poison_later_calls(monkeypatch, tmp_yaml):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_yaml("bogus: 1\n")))
    set_config(None)
    with pytest.raises(ValidationError):
        get_config()

    monkeypatch.delenv(CONFIG_ENV_VAR)
    assert get_config() == RenderConfig()


def test_configure_overrides_selected_fields():
    set_config(RenderConfig(use_colors=False))
    updated = configure(enhanced_output=True)
    assert updated.use_colors is False
    assert updated.enhanced_output is True
    assert get_config() is updated
