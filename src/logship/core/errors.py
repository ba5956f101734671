"""Error types for log delivery.

Delivery errors are never raised out of a logging call. Transports and
handlers wrap them in a ``SendResult`` and hand them to the diagnostic
logger and the send observer.
"""


class DeliveryError(Exception):
    """Base class for a log event that could not be delivered."""


class TransportError(DeliveryError):
    """No response was received (connection, DNS, TLS, timeout, bad URL)."""


class InvalidResponseType(DeliveryError):
    """A response arrived but was not a well-formed HTTP response."""


class ErrorStatusCode(DeliveryError):
    """The collector answered with a status code outside [200, 300).

    Attributes:
        status_code: HTTP status code of the response.
        body: Response body decoded as text, or None when empty.
    """

    def __init__(self, status_code: int, body: str | None = None) -> None:
        super().__init__(status_code, body)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.body:
            return f"HTTP {self.status_code}: {self.body}"
        return f"HTTP {self.status_code}"


class SerializationError(DeliveryError):
    """The log event could not be encoded as JSON."""


class ReservedMetadataKeyWarning(UserWarning):
    """Metadata defines a key that the payload envelope overwrites."""
