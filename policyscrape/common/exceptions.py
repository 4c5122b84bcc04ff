"""Exception types for scraper errors.

Two families live here. Assumption exceptions mean a carrier's page no
longer looks the way an extraction strategy expects; the strategy code
needs updating. Transient exceptions mean a page could not be fetched at
all; whether that is fatal is up to the scraper driving the fetch.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """Base class for scraper assumption violations.

    Extraction strategies make assumptions about page structure and
    formats. When these assumptions are violated, they raise clear,
    contextual exceptions that help diagnose the issue.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: The URL of the page that triggered this error.
            context: Optional dict of additional context (selector, counts, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """Raised when HTML structure doesn't match expectations.

    Raised when a CSS selector returns a different number of elements than
    expected, or cannot be compiled at all. This usually indicates that the
    carrier changed its page layout.

    Attributes:
        selector: The CSS selector that was used.
        description: Human-readable description of what was being selected.
        expected_min: Minimum number of elements expected.
        expected_max: Maximum number of elements expected (None = unlimited).
        actual_count: Actual number of elements found.
    """

    def __init__(
        self,
        selector: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str,
    ) -> None:
        self.selector = selector
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"HTML structure mismatch: Expected {expected_str} "
            f"elements for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
        }

        super().__init__(message, request_url, context)


class UnknownCarrierException(ValueError):
    """Raised when a carrier tag has no registered definition or scraper."""

    def __init__(self, carrier: Any) -> None:
        self.carrier = carrier
        super().__init__(f"No scraper registered for carrier {carrier!r}")


# =============================================================================
# Transient Exceptions
# =============================================================================


class TransientException(Exception):
    """Base class for failures to retrieve a page.

    Covers unexpected status codes, timeouts and connection problems alike.
    Nothing in this package retries; single-page scrapers let the exception
    propagate and the paginated scraper reads it as "no more pages".
    """

    pass


class HTMLResponseAssumptionException(TransientException):
    """Raised when an HTTP response has an unexpected status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)


class RequestTimeoutException(TransientException):
    """Raised when a request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The configured timeout in seconds, if any.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is None:
            self.message = f"Request to {url} timed out"
        else:
            self.message = (
                f"Request to {url} timed out after {timeout_seconds}s"
            )
        super().__init__(self.message)


class RequestTransportException(TransientException):
    """Raised when a request fails below the HTTP layer.

    DNS failures, refused connections and protocol errors all end up here.

    Attributes:
        url: The URL that could not be fetched.
        reason: String form of the underlying error.
        message: Human-readable error message.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        self.message = f"Request to {url} failed: {reason}"
        super().__init__(self.message)
