from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urlencode

import httpx

from bessertanken.config import DEFAULT_BASE_URL

API_KEY_HEADER = "apikey"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class Endpoint(Enum):
    """The four Kraftstoffbilliger endpoints with their fixed path and verb."""
    TYPES = ("/types", HttpMethod.GET)
    SEARCH = ("/search", HttpMethod.POST)
    ROUTING = ("/routing", HttpMethod.POST)
    DETAILS = ("/details", HttpMethod.POST)

    def __init__(self, path: str, method: HttpMethod):
        self.path = path
        self.method = method

    def url(self, base_url: str = DEFAULT_BASE_URL) -> str:
        return f"{base_url.rstrip('/')}{self.path}"


def encode_form(params: Mapping[str, str]) -> str:
    """
    Percent-encode form fields as 'key=value' pairs joined by '&'.
    Pairs keep the caller's order; spaces become '+'.
    """
    return urlencode([(key, str(value)) for key, value in params.items()])


def build_request(
    endpoint: Endpoint,
    method: Optional[HttpMethod] = None,
    params: Optional[Mapping[str, str]] = None,
    api_key: str = "",
    base_url: str = DEFAULT_BASE_URL,
) -> httpx.Request:
    """
    Build the outbound request for an endpoint without sending it.

    The API key header is always set. POST requests get a form-encoded body
    and a matching Content-Type; GET requests carry neither.
    """
    method = HttpMethod(method or endpoint.method)
    headers = {API_KEY_HEADER: api_key}

    if method == HttpMethod.GET:
        if params:
            raise ValueError(f"GET {endpoint.name} does not take form parameters")
        return httpx.Request(method.value, endpoint.url(base_url), headers=headers)

    headers["Content-Type"] = FORM_CONTENT_TYPE
    body = encode_form(params or {})
    return httpx.Request(method.value, endpoint.url(base_url), headers=headers, content=body.encode("utf-8"))
