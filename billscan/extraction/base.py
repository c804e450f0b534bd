from typing import Protocol


class BillExtractor(Protocol):
    async def generate(self, image_bytes: bytes, mime_type: str) -> str:
        """Send the bill image to the model and return its raw text reply."""
        ...
