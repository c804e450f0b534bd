"""Turn the model's free-text reply into a JSON response body.

Models usually wrap their JSON in a markdown fence, sometimes without the
``json`` label, and sometimes answer with bare JSON. Each strategy below
proposes one candidate span; the first candidate that parses wins. A reply
nothing can parse still yields a 200 body carrying the raw text so the
caller can inspect it.
"""

import json
import logging
import math
import re
from typing import Any, Callable

from pydantic import ValidationError

from billscan.schemas import BillExtraction

logger = logging.getLogger("billscan")

PARSE_ERROR = "Could not parse JSON from response"

LABELED_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
GENERIC_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")


def _fenced(pattern: re.Pattern) -> Callable[[str], str | None]:
    def candidate(text: str) -> str | None:
        match = pattern.search(text)
        return match.group(1) if match else None
    return candidate


def _whole(text: str) -> str | None:
    return text


STRATEGIES: list[tuple[str, Callable[[str], str | None]]] = [
    ("labeled_fence", _fenced(LABELED_FENCE)),
    ("generic_fence", _fenced(GENERIC_FENCE)),
    ("raw", _whole),
]

_MISSING = object()


def _reject_constant(token: str):
    raise ValueError(f"{token} is not valid JSON")


def _finite_float(token: str) -> float:
    value = float(token)
    if math.isinf(value):
        raise ValueError(f"{token} is out of range")
    return value


def _try_parse(candidate: str | None) -> Any:
    if candidate is None:
        return _MISSING
    try:
        return json.loads(candidate, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, RecursionError):
        return _MISSING


def extract_json(text: str) -> Any:
    """Return the first parseable JSON value found in text, or raise ValueError."""
    for name, strategy in STRATEGIES:
        data = _try_parse(strategy(text))
        if data is not _MISSING:
            logger.debug("Parsed model reply", extra={"extra_data": {"strategy": name}})
            return data
    raise ValueError(PARSE_ERROR)


def dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def normalize_response(text: str) -> str:
    """Serialize the JSON embedded in a model reply, or a diagnostic envelope."""
    try:
        data = extract_json(text)
        body = dumps(data)
    except (ValueError, RecursionError):
        logger.warning(
            "Model reply is not JSON",
            extra={"extra_data": {"reply_length": len(text)}},
        )
        return dumps({"raw_response": text, "error": PARSE_ERROR})

    log_reconciliation(data)
    return body


def log_reconciliation(data: Any) -> bool | None:
    """Check subtotal + tax against total; returns None when data is not a bill."""
    try:
        bill = BillExtraction.model_validate(data)
    except ValidationError:
        logger.info("Model reply does not match the bill schema")
        return None

    reconciled = bill.is_reconciled()
    details = {
        "items_count": len(bill.items),
        "subtotal": bill.subtotal,
        "tax": bill.tax,
        "total": bill.total,
        "reconciled": reconciled,
    }
    if reconciled:
        logger.info("Bill extracted", extra={"extra_data": details})
    else:
        logger.warning("Bill totals do not reconcile", extra={"extra_data": details})
    return reconciled
