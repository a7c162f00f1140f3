"""
Custom exceptions for the fetching module.

Transport failures are expressed as RemoteRequestError so the cached fetcher
can tell them apart from HTTP responses with a failure status.
"""


class RemoteRequestError(Exception):
    """
    Exception raised when the origin could not be reached.

    This covers connection failures, DNS errors, timeouts and TLS problems.
    A response with a non-200 status is not a RemoteRequestError; it is
    returned to the caller as a regular response.

    Attributes:
        message: Explanation of the error
        url: The URL that was requested, if known
    """

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.message = message
        self.url = url

    def __str__(self):
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message
