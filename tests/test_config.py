"""
Tests for settings and fingerprint option wiring.
"""

import pytest
from pydantic import ValidationError

from src.config import Settings, fingerprint_options
from src.fingerprint.constants import DEFAULT_IP_HEADERS
from src.fingerprint.normalizers import collapse_ids


def test_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.ip_headers == list(DEFAULT_IP_HEADERS)
    assert cfg.include_method is False
    assert cfg.include_path is False
    assert cfg.rate_limit_window_sec == 60


def test_log_level_validation():
    assert Settings(_env_file=None, log_level="DEBUG").log_level == "debug"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="verbose")


def test_ip_headers_lowercased():
    cfg = Settings(_env_file=None, ip_headers=["X-Real-IP", " Forwarded ", ""])
    assert cfg.ip_headers == ["x-real-ip", "forwarded"]


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("FPYX_INCLUDE_PATH", "true")
    monkeypatch.setenv("FPYX_IP_HEADERS", '["fly-client-ip"]')
    cfg = Settings(_env_file=None)
    assert cfg.include_path is True
    assert cfg.ip_headers == ["fly-client-ip"]


def test_fingerprint_options():
    options = fingerprint_options(Settings(_env_file=None, include_method=True, collapse_path_ids=True))
    assert options.ip_headers == DEFAULT_IP_HEADERS
    assert options.include_method is True
    assert options.path_normalizer is collapse_ids
    assert options.hash_fn is None

    assert fingerprint_options(Settings(_env_file=None)).path_normalizer is None
