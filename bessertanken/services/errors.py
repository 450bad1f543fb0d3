from typing import Any


class KraftstoffbilligerError(Exception):
    pass


class TransportError(KraftstoffbilligerError):
    """The request never produced a response (connection refused, timeout, ...)."""


class ResponseError(KraftstoffbilligerError):
    """A response arrived but could not be turned into domain records."""


class MalformedResponse(ResponseError):
    pass


class MissingEnvelopeKey(ResponseError):
    def __init__(self, key: str):
        super().__init__(f"Response has no '{key}' field")
        self.key = key


class EmptyResult(ResponseError):
    def __init__(self, key: str):
        super().__init__(f"Response field '{key}' is an empty array")
        self.key = key


def describe_node(node: Any, limit: int = 200) -> str:
    try:
        text = repr(node)
    except RecursionError:
        return f"<deeply nested {type(node).__name__}>"
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class DecodeError(ResponseError):
    """A JSON node did not have the shape its decoder expects."""

    def __init__(self, message: str, node: Any = None):
        super().__init__(f"{message}: {describe_node(node)}")
        self.node = node


class UnknownFuelTypeId(DecodeError):
    def __init__(self, fuel_type_id: Any, node: Any = None):
        super().__init__(f"Unknown fuel type id {fuel_type_id!r}", node if node is not None else fuel_type_id)
        self.fuel_type_id = fuel_type_id


class MalformedTimestamp(DecodeError):
    pass


class MissingField(DecodeError):
    def __init__(self, field: str, node: Any = None):
        super().__init__(f"Missing field '{field}'", node)
        self.field = field


class InvalidField(DecodeError):
    def __init__(self, field: str, expected: str, node: Any = None):
        super().__init__(f"Field '{field}' is not {expected}", node)
        self.field = field


class MalformedPositionalArray(DecodeError):
    pass
