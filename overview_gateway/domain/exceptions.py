"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UpstreamReadError(DomainException):
    """A collaborator read (store or FX source) failed"""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class FxRateError(DomainException):
    """FX rate service returned an error or is unavailable"""

    pass


class InvalidPeriodError(DomainException):
    """Period string is not one of the supported windows"""

    pass


class EntityNotFoundError(DomainException):
    """Entity does not exist for this tenant"""

    pass


class PeriodNotFoundError(DomainException):
    """Fiscal period does not exist for this tenant"""

    pass


class PeriodStatusError(DomainException):
    """Fiscal period is not in a state that allows readiness checks"""

    pass
