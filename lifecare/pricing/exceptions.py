"""
Pricing errors.

All are caller-input errors: deterministic, never retried.
"""


class PricingError(ValueError):
    """Base class for price calculation failures."""

    error_code: str = "PRICING_ERROR"

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.message = message
        self.value = value


class InvalidServiceError(PricingError):
    """Raised when a service identifier is not in the catalog."""

    error_code = "INVALID_SERVICE"

    def __init__(self, service: object):
        super().__init__(f"Invalid service type: {service}", value=service)


class InvalidDurationError(PricingError):
    """Raised when a duration code is not in the duration-tier table."""

    error_code = "INVALID_DURATION"

    def __init__(self, duration: object):
        super().__init__(f"Invalid duration: {duration}", value=duration)


class InvalidDaysError(PricingError):
    """Raised when the day count is not an integer (booleans included)."""

    error_code = "INVALID_DAYS"

    def __init__(self, days: object):
        super().__init__(f"Invalid number of days: {days}", value=days)
