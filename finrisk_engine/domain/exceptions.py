"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidScenarioInput(DomainException):
    """Scenario parameter is missing or not a finite number"""

    pass


class InvalidHorizon(DomainException):
    """Projection horizon is outside the permitted set"""

    pass


class InvalidAgingRecord(DomainException):
    """AR/AP line item cannot be classified (e.g. no due date)"""

    pass
