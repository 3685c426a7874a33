"""Exception hierarchy for Web Push encryption and delivery."""

from __future__ import annotations


class WebPushError(Exception):
    """
    Base exception for all Web Push errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class UnsupportedCurveError(WebPushError, ValueError):
    """
    Raised when a key is not a point on P-256 (secp256r1).

    This is a caller error and is not retryable.

    Attributes:
        curve_name: Name of the curve the key was on, if it could be determined.
    """

    def __init__(self, message: str, *, curve_name: str | None = None) -> None:
        self.curve_name = curve_name
        super().__init__(message)


class RandomnessUnavailableError(WebPushError):
    """
    Raised when the secure random source cannot supply bytes.

    Fatal for the encrypt operation. Retrying will not help until the
    environment is fixed.
    """


class CipherFailureError(WebPushError):
    """
    Raised when a cipher or derivation primitive rejects its parameters.

    Lengths are fixed and validated before use, so this indicates a bug.
    """


class InvalidLengthError(WebPushError, ValueError):
    """
    Raised when HKDF is asked for more output than it can produce.

    Attributes:
        requested: The number of bytes requested.
        maximum: The largest number of bytes that may be requested.
    """

    def __init__(self, requested: int, maximum: int) -> None:
        self.requested = requested
        self.maximum = maximum
        super().__init__(f"HKDF output length must be in [0, {maximum}], got {requested}")


class ConfigurationError(WebPushError):
    """
    Raised when a notification needs configuration that is missing.

    The legacy GCM path requires an API key.
    """


class TransportError(WebPushError):
    """
    Raised when delivering a request to the push service fails.

    Covers timeouts, refused connections and non-2xx responses. Retry
    policy is left to the caller.

    Attributes:
        status_code: HTTP status of the response, or None if no response arrived.
        body: Response body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: bytes = b"",
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)
