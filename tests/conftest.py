import base64

import pytest
from fastapi.testclient import TestClient

from billscan.config import Settings
from billscan.main import create_app

PROD_ORIGIN = "https://www.satyajeetnigade.in"
LOCAL_ORIGIN = "http://localhost:5173"

IMAGE_BYTES = b"\x89PNG\r\n\x1a\nfake-bill-image"
IMAGE_B64 = base64.b64encode(IMAGE_BYTES).decode("utf-8")

BILL_REPLY = """Here is the bill:
```json
{"items": [{"name": "Beer", "price": 200.0, "quantity": 6}], "subtotal": 1200.0, "tax": 60.0, "total": 1260.0}
```"""


class FakeExtractor:
    def __init__(self, reply: str = BILL_REPLY, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, image_bytes: bytes, mime_type: str) -> str:
        self.calls.append((image_bytes, mime_type))
        if self.error:
            raise self.error
        return self.reply


def make_settings(**overrides) -> Settings:
    values = {
        "allowed_origins": (LOCAL_ORIGIN, PROD_ORIGIN),
        "gemini_api_key": "test-key",
        "rate_limit": "1000/minute",
    }
    values.update(overrides)
    return Settings(**values)


def image_payload(mime_type: str = "image/jpeg", data: str = IMAGE_B64) -> dict:
    return {"image": {"base64Data": data, "mimeType": mime_type}}


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def client(extractor):
    app = create_app(make_settings(), extractor=extractor)
    return TestClient(app)
