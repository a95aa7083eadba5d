from types import SimpleNamespace

import pytest

from ldtk import settings
from ldtk.settings import (
    DEFAULT_VARIANT,
    VARIANTS,
    load_smtp_config,
    load_stats_sheet,
    load_variant,
    parse_email_list,
    safe_get_secret,
)

ENV_KEYS = [
    "LDTK_VARIANT", "SENDER_FROM_EMAIL", "SMTP_SERVER", "SMTP_PORT", "EMAIL_USER",
    "EMAIL_PASSWORD", "QUOTE_TRACKING_CC_EMAIL", "STATS_SPREADSHEET_ID", "STATS_TAB",
]


@pytest.fixture
def secrets(monkeypatch):
    """Replace Streamlit secrets with a plain dict and clear the environment."""
    values = {}
    monkeypatch.setattr(settings, "st", SimpleNamespace(secrets=values))
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return values


def test_variants_differ_in_floor():
    assert VARIANTS["ldtk"].min_new_thickness == 40
    assert VARIANTS["ldtk-50"].min_new_thickness == 50
    assert VARIANTS["ldtk"].template.template_id != VARIANTS["ldtk-50"].template.template_id


def test_parse_email_list():
    assert parse_email_list("a@x.pl; b@x.pl, ,c@x.pl") == ["a@x.pl", "b@x.pl", "c@x.pl"]
    assert parse_email_list(None) == []


def test_secret_falls_back_to_env(secrets, monkeypatch):
    monkeypatch.setenv("SMTP_SERVER", "env.example.pl")
    assert safe_get_secret("SMTP_SERVER") == "env.example.pl"
    secrets["SMTP_SERVER"] = "secret.example.pl"
    assert safe_get_secret("SMTP_SERVER") == "secret.example.pl"
    assert safe_get_secret("MISSING", default="x") == "x"


def test_secret_access_never_raises(monkeypatch):
    class Exploding:
        def get(self, key):
            raise FileNotFoundError("no secrets.toml")

    monkeypatch.setattr(settings, "st", SimpleNamespace(secrets=Exploding()))
    monkeypatch.delenv("SMTP_SERVER", raising=False)
    assert safe_get_secret("SMTP_SERVER", required=True) is None


def test_load_variant(secrets, caplog):
    assert load_variant().key == DEFAULT_VARIANT
    secrets["LDTK_VARIANT"] = "ldtk-50"
    assert load_variant().min_new_thickness == 50
    secrets["LDTK_VARIANT"] = "bogus"
    assert load_variant().key == DEFAULT_VARIANT
    assert "Unknown LDTK_VARIANT" in caplog.text


def test_smtp_config_requires_all_fields(secrets):
    secrets.update(SENDER_FROM_EMAIL="noreply@starfix.eu", SMTP_SERVER="smtp.example.pl", EMAIL_USER="u")
    assert load_smtp_config() is None

    secrets.update(EMAIL_PASSWORD="p", QUOTE_TRACKING_CC_EMAIL="a@x.pl;b@x.pl")
    cfg = load_smtp_config()
    assert cfg.port == 587
    assert cfg.cc == ["a@x.pl", "b@x.pl"]

    secrets["SMTP_PORT"] = "465"
    assert load_smtp_config().port == 465


def test_stats_sheet(secrets):
    assert load_stats_sheet() is None
    secrets["STATS_SPREADSHEET_ID"] = "sheet-id"
    assert load_stats_sheet() == ("sheet-id", "Stats")
