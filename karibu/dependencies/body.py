from json import JSONDecodeError
from typing import Any, Dict

from fastapi import Request

from karibu.core.exceptions import ValidationFailed, Violation


async def get_json_body(request: Request) -> Dict[str, Any]:
    """
    The request body as a JSON object.

    Declare it after the guard dependency in a handler's signature: the body
    is only read once the caller is known to be allowed in.
    """
    if not await request.body():
        raise ValidationFailed([Violation(field="body", message="Request body is required")])
    try:
        payload = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailed([Violation(field="body", message="Request body must be valid JSON")]) from None
    if not isinstance(payload, dict):
        raise ValidationFailed([Violation(field="body", message="Request body must be a JSON object")])
    return payload
