"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    collaborator = "core"

    def __init__(self, message: str, collaborator: str | None = None):
        super().__init__(message)
        if collaborator is not None:
            self.collaborator = collaborator


class InputError(DomainException):
    """Request parameters are invalid (e.g. unknown forecast period)"""

    collaborator = "request"


class UpstreamError(DomainException):
    """Ledger Store is unreachable or returned malformed data"""

    collaborator = "ledger"


class OracleError(DomainException):
    """Forecast Oracle is unreachable or its payload cannot be used"""

    collaborator = "oracle"
