# campusconnect/core/responses.py
from typing import Any, List, Optional


def success(message: str, data: Any = None) -> dict:
    body = {"status": "success", "message": message}
    if data is not None:
        body["data"] = data
    return body


def error(message: str, errors: Optional[List[dict]] = None, data: Any = None) -> dict:
    body = {"status": "error", "message": message}
    if errors:
        body["errors"] = errors
    if data is not None:
        body["data"] = data
    return body
