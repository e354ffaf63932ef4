from __future__ import annotations


class GiphyError(Exception):
    pass


class ConfigurationError(GiphyError):
    pass


class TransportError(GiphyError):
    """No HTTP response was obtained (connect failure, timeout, protocol error)."""


class JSONParseError(GiphyError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JSONShapeError(GiphyError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HTTPError(GiphyError):
    """Non-200 response.

    ``status_code`` is the API-reported ``meta.status`` when the body carries one,
    otherwise the transport status code. ``message`` is ``meta.msg`` or ``None``.
    """

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class MappingError(GiphyError):
    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class RequestCancelledError(GiphyError):
    pass
