import pytest

from billscan.config import DEFAULT_MAX_IMAGE_BYTES, Settings, load_settings
from billscan.schemas import BillExtraction


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("ALLOWED_ORIGINS", "GEMINI_API_KEY", "GEMINI_MODEL", "BILL_PROVIDER",
                 "RATE_LIMIT", "MAX_IMAGE_BYTES", "SENTRY_DSN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("billscan.config.load_dotenv", lambda: None)


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.allowed_origins == ("http://localhost:5173", "https://www.satyajeetnigade.in")
    assert settings.gemini_api_key is None
    assert settings.gemini_model == "gemini-2.0-flash"
    assert settings.provider == "gemini"
    assert settings.max_image_bytes == DEFAULT_MAX_IMAGE_BYTES
    assert settings.sentry_dsn is None


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", " https://a.example , ,https://b.example")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("MAX_IMAGE_BYTES", "1024")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.allowed_origins == ("https://a.example", "https://b.example")
    assert settings.gemini_api_key == "secret"
    assert settings.max_image_bytes == 1024
    assert settings.log_level == "DEBUG"


def test_settings_are_frozen():
    settings = Settings(allowed_origins=("https://a.example",))
    with pytest.raises(AttributeError):
        settings.allowed_origins = ()


@pytest.mark.parametrize("origin, expected", [
    ("https://www.satyajeetnigade.in", "https://www.satyajeetnigade.in"),
    ("http://localhost:5173", "http://localhost:5173"),
    ("https://evil.example", None),
    ("", None),
    (None, None),
])
def test_match_origin(origin, expected):
    settings = Settings(allowed_origins=("http://localhost:5173", "https://www.satyajeetnigade.in"))
    assert settings.match_origin(origin) == expected


def test_bill_reconciliation_tolerance():
    bill = BillExtraction(items=[], subtotal=100.0, tax=18.0, total=118.01)
    assert bill.is_reconciled()
    bill = BillExtraction(items=[], subtotal=100.0, tax=18.0, total=118.02)
    assert not bill.is_reconciled()


def test_bill_item_defaults_quantity():
    bill = BillExtraction.model_validate(
        {"items": [{"name": "Tea", "price": 2.0}], "subtotal": 2.0, "tax": 0.0, "total": 2.0}
    )
    assert bill.items[0].quantity == 1
    assert bill.items[0].discount is None
