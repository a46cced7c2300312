# ABOUTME: Exception hierarchy for upstream fetches, device location and configuration.
# ABOUTME: Messages are the user-facing strings written into a city's Error fetch state.


class WeatherAppError(Exception):
    """Base class for all errors raised by weatherapp."""


class ConfigError(WeatherAppError):
    """Raised when required configuration (e.g. the API key) is missing or invalid."""


class FetchError(WeatherAppError):
    """A single upstream request failed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(FetchError):
    """Transport-level failure: connection refused, DNS, timeout."""

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")
        self.detail = detail


class ApiError(FetchError):
    """The upstream answered with a non-success status code."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"API error: {status_code} - {message}")
        self.status_code = status_code
        self.upstream_message = message


class EmptyBodyError(FetchError):
    """The upstream answered 2xx but the body was missing or could not be parsed."""

    def __init__(self, detail: str | None = None):
        super().__init__("No data received from API")
        self.detail = detail


class LocationError(WeatherAppError):
    """Device location could not be resolved."""


class PermissionDeniedError(LocationError):
    def __init__(self, message: str = "Location permission not granted"):
        super().__init__(message)


class LocationUnavailableError(LocationError):
    def __init__(self, message: str = "Location not available"):
        super().__init__(message)


class PlatformLocationError(LocationError):
    """The platform location service itself failed."""
