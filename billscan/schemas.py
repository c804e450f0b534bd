from typing import Literal

from pydantic import BaseModel, Field


# --- Request ---

class ImageInput(BaseModel):
    base64Data: str = Field(min_length=1)
    mimeType: str = Field(min_length=1)


class ExtractionRequest(BaseModel):
    image: ImageInput


# --- Bill (shape requested from the model) ---

class Discount(BaseModel):
    value: float
    discountType: Literal["flat", "percentage"]


class BillItem(BaseModel):
    name: str
    price: float
    quantity: int = Field(default=1, ge=1)
    discount: Discount | None = None


class BillExtraction(BaseModel):
    items: list[BillItem]
    subtotal: float
    tax: float
    total: float

    def is_reconciled(self, tolerance: float = 0.01) -> bool:
        """True when subtotal + tax matches total within tolerance."""
        # round() absorbs float noise like 0.1 + 0.2
        return round(abs(self.subtotal + self.tax - self.total), 6) <= tolerance
