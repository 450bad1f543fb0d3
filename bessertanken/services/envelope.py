import json
from typing import Any

from bessertanken.services.errors import EmptyResult, MalformedResponse, MissingEnvelopeKey

TYPES_KEY = "types"
RESULTS_KEY = "results"
RESULT_KEY = "result"


def unwrap(body: str, key: str) -> Any:
    """Parse a response body and return the payload stored under `key`."""
    try:
        document = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Response body is not valid JSON: {e}")
    except RecursionError:
        raise MalformedResponse("Response body is nested too deeply to parse")

    if not isinstance(document, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(document).__name__}")
    if key not in document:
        raise MissingEnvelopeKey(key)
    return document[key]


def unwrap_first(body: str, key: str) -> Any:
    """
    Unwrap a single-entity response. The details endpoint always wraps its
    one result in an array: {"result": [{...}]}.
    """
    payload = unwrap(body, key)
    if not isinstance(payload, list):
        raise MalformedResponse(f"Expected '{key}' to be an array, got {type(payload).__name__}")
    if not payload:
        raise EmptyResult(key)
    return payload[0]
