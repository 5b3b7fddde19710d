from typing import Optional


class RescaleError(Exception):
    """Base class for every failure of a rescale call."""


class CredentialError(RescaleError):
    """No authenticated client could be obtained."""


class IdentityResolutionError(RescaleError):
    """The project or the service name could not be determined."""


class TransportError(RescaleError):
    """
    Network-level failure talking to the admin API: connection errors,
    timeouts, or a non-success answer to the read.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(RescaleError):
    """The service description was not valid JSON of the expected shape."""


class UpdateRejectedError(RescaleError):
    def __init__(self, status_code: int):
        super().__init__(f"Cloud Run API response code: {status_code}")
        self.status_code = status_code
