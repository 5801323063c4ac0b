"""Error taxonomy for food analysis and the food log."""


class AnalysisError(Exception):
    """Base class for terminal failures of a single analysis call."""

    kind = "analysis_error"


class EncodingError(AnalysisError):
    """The captured image could not be serialized."""

    kind = "encoding_error"


class TransportError(AnalysisError):
    """The request never produced a response (connection failure or timeout)."""

    kind = "transport_error"


class HTTPError(AnalysisError):
    """The service answered with a non-success status."""

    kind = "http_error"

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Analysis service returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class EmptyResponseError(AnalysisError):
    """The service answered without a body or without message content."""

    kind = "empty_response"


class MalformedResponseError(AnalysisError):
    """The body is not JSON or lacks choices[0].message.content."""

    kind = "malformed_response"


class SchemaError(AnalysisError):
    """The message content does not match the nutrition estimate shape."""

    kind = "schema_error"


class NoFoodDetected(AnalysisError):  # noqa: N818
    """The service reported a non-food sentinel instead of an estimate."""

    kind = "no_food_detected"

    def __init__(self, sentinel: str) -> None:
        super().__init__(f"No food detected ({sentinel!r})")
        self.sentinel = sentinel


class AnalysisCancelled(AnalysisError):  # noqa: N818
    """The caller cancelled the analysis before it resolved."""

    kind = "cancelled"


class NotFoundError(LookupError):
    """A food log entry could not be found for removal or lookup."""
