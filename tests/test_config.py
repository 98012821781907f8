import pytest

from cipherforge.config import Settings, load_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_defaults():
    s = Settings()
    assert s.default_mode == "CBC"
    assert s.encrypt_input_encoding == "utf8"
    assert s.encrypt_output_encoding == "base64"
    assert s.decrypt_input_encoding == "base64"
    assert s.decrypt_output_encoding == "utf8"
    assert s.trim_trailing_zeros_on_decrypt is True
    assert s.global_seed == 1337


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CIPHERFORGE_DEFAULT_MODE", "ECB")
    monkeypatch.setenv("CIPHERFORGE_OUTPUT_ENCODING", "hex")
    monkeypatch.setenv("CIPHERFORGE_TRIM_NULLS", "no")
    monkeypatch.setenv("CIPHERFORGE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GLOBAL_SEED", "7")
    monkeypatch.setenv("RUNS_DIR", "elsewhere")
    s = load_settings()
    assert s.default_mode == "ECB"
    assert s.encrypt_output_encoding == "hex"
    assert s.trim_trailing_zeros_on_decrypt is False
    assert s.log_level == "DEBUG"
    assert s.global_seed == 7
    assert s.runs_dir == "elsewhere"


def test_settings_are_cached():
    assert load_settings() is load_settings()
