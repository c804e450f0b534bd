import logging

from google import genai
from google.genai import types

from billscan.errors import ExtractionError

logger = logging.getLogger("billscan")

ANALYSIS_PROMPT = """\
You are a restaurant bill parser. The image is a photo of a restaurant bill listing food and drink items.
Return the bill as JSON inside a ```json fenced block, with exactly this shape:

```json
{
  "items": [
    {"name": "Paneer Tikka", "price": 320.00, "quantity": 1},
    {"name": "Beer", "price": 200.00, "quantity": 6},
    {"name": "Dal Makhani", "price": 280.00, "quantity": 1,
     "discount": {"value": 10, "discountType": "percentage"}}
  ],
  "subtotal": 1772.00,
  "tax": 88.60,
  "total": 1860.60
}
```

Rules:
- items: one entry per ordered item. If an item name wraps onto several lines, merge it into a single name.
- quantity: an integer, 1 if no quantity is printed.
- price: the price of ONE unit. When a line shows a quantity and a line total, divide
  (e.g. "Beer 6 1200" means quantity 6, price 200.00).
- discount: only when the bill shows a discount for that specific item. value is the amount or the percentage,
  discountType is "flat" for an amount and "percentage" for a percentage.
- A discount applied to the whole bill becomes its own item named after the discount with quantity 1
  and a negative price equal to the discount amount.
- tax: the sum of ALL additions applied on top of the items: service charge, VAT, GST, CGST, SGST, cess and similar.
  Do NOT list these as items.
- subtotal: the sum of every item's line total (price * quantity, after its discount) before tax.
- total: the final amount paid, as printed on the bill.
- All numbers are plain numbers without currency symbols, with two decimal places of precision.
- Before answering, check that subtotal + tax equals total within 0.01. If it does not, recheck the
  quantities and the discount math and correct them.
- Output only the fenced JSON block, no other text."""


class GeminiBillExtractor:
    """Bill extraction using the Gemini multimodal API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.0-flash",
        prompt: str = ANALYSIS_PROMPT,
        client: genai.Client | None = None,
    ):
        self.model = model
        self.prompt = prompt
        self.client = client or genai.Client(api_key=api_key)

    async def generate(self, image_bytes: bytes, mime_type: str) -> str:
        image_part = types.Part.from_bytes(data=image_bytes, mime_type=mime_type)

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[self.prompt, image_part],
            )
            text = response.text
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise ExtractionError(f"Gemini API error: {e}") from e

        return text or ""
