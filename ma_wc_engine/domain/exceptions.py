"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Calculation input violates a precondition (e.g. non-positive AWW)"""

    pass


class NoApplicableRateError(DomainException):
    """No rate table period covers the requested date"""

    def __init__(self, message: str, available_periods: list[str] | None = None):
        super().__init__(message)
        self.available_periods = available_periods or []


class InvalidDateRangeError(DomainException):
    """End date precedes start date"""

    pass


class InvalidLedgerEntryError(DomainException):
    """Ledger entry failed validation and cannot enter the ledger"""

    def __init__(self, errors: list):
        self.errors = errors
        detail = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid ledger entry: {detail}")


class InvalidRateTableError(DomainException):
    """Rate table document is malformed"""

    pass


class RateTableUnavailableError(DomainException):
    """Rate table source could not be read or fetched"""

    pass
