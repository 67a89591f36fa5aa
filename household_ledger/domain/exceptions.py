"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTargetPeriod(DomainException):
    """Requested month is outside 1..12"""

    pass


class InvalidRecordError(DomainException):
    """Stored document cannot be decoded into a typed record"""

    pass


class InvalidInstallmentCount(InvalidRecordError):
    """Installment count is missing, not an integer, or below 1"""

    pass


class UnparseableDate(InvalidRecordError):
    """Date field cannot be read as a calendar date"""

    pass


class InvalidAmount(InvalidRecordError):
    """Money field is missing, non-numeric or negative"""

    pass


class UnknownEntryKind(InvalidRecordError):
    """Ledger entry carries a kind tag outside the closed set"""

    pass


class RecordNotFoundError(DomainException):
    """No document with the given id in the collection"""

    pass


class IdentityProviderError(DomainException):
    """Identity provider rejected the token or is unavailable"""

    pass


class UnauthorizedIdentityError(DomainException):
    """Authenticated email is not on the allow-list"""

    pass
