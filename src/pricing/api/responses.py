"""JSON response that writes Decimal values as JSON numbers.

The stdlib encoder turns a Decimal into a float (or refuses it), which drops
trailing zeros: Decimal("100.00") would go out as 100.0. Prices must keep
both cent digits on the wire, so Decimals are written with their own
string form and everything else goes through json.dumps.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from fastapi.responses import JSONResponse


def _encode(value: Any) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Non-finite decimal is not JSON compliant: {value}")
        return str(value)
    if isinstance(value, dict):
        items = (
            json.dumps(str(key), ensure_ascii=False) + ":" + _encode(item)
            for key, item in value.items()
        )
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def dumps(content: Any) -> str:
    """Compact JSON text; Decimals keep their exponent, e.g. 100.00."""
    return _encode(content)


class DecimalJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return dumps(content).encode("utf-8")
