import pytest
from pydantic import ValidationError

from imgvariant.io.settings import DEFAULT_VARIABLE_CONTENT_TYPES, TransformerSettings, get_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "IMGVARIANT_VARIABLE_CONTENT_TYPES",
        "IMGVARIANT_TMP_DIR",
        "IMGVARIANT_TEMPFILE_PREFIX",
        "IMGVARIANT_DEFAULT_QUALITY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(clean_env):
    settings = TransformerSettings()
    assert settings.variable_content_types == DEFAULT_VARIABLE_CONTENT_TYPES
    assert settings.tmp_dir is None
    assert settings.tempfile_prefix == "transformer_"
    assert settings.default_quality is None


def test_env_override(clean_env, monkeypatch):
    monkeypatch.setenv("IMGVARIANT_VARIABLE_CONTENT_TYPES", '["IMAGE/PNG", "image/webp"]')
    monkeypatch.setenv("IMGVARIANT_DEFAULT_QUALITY", "80")
    settings = TransformerSettings()
    assert settings.variable_content_types == ["image/png", "image/webp"]
    assert settings.default_quality == 80


def test_env_file(clean_env, tmp_path):
    (tmp_path / "imgvariant.env").write_text("IMGVARIANT_TEMPFILE_PREFIX=variant_\nOTHER=1\n")
    assert TransformerSettings().tempfile_prefix == "variant_"


def test_quality_bounds(clean_env, monkeypatch):
    monkeypatch.setenv("IMGVARIANT_DEFAULT_QUALITY", "101")
    with pytest.raises(ValidationError):
        TransformerSettings()


def test_get_settings_is_cached(clean_env, monkeypatch):
    first = get_settings()
    monkeypatch.setenv("IMGVARIANT_TEMPFILE_PREFIX", "other_")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().tempfile_prefix == "other_"
