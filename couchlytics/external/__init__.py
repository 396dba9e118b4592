from .couchlytics_client import (
    CouchlyticsClient, CouchlyticsAPIError, CouchlyticsAuthError, CouchlyticsRateLimitError
)

__all__ = [
    "CouchlyticsClient",
    "CouchlyticsAPIError",
    "CouchlyticsAuthError",
    "CouchlyticsRateLimitError"
]
