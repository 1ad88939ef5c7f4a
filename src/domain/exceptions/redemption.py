"""Redemption-related domain exceptions."""

from .base import DomainException


class InvalidRedemptionRequestException(DomainException):
    """Raised when a redemption quote or commit has invalid inputs."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_REDEMPTION_REQUEST",
        )


class InsufficientBalanceException(DomainException):
    """Raised when a redemption exceeds the matured balance."""

    def __init__(self, requested_cents: int, available_cents: int):
        super().__init__(
            message=(
                f"Redemption of {requested_cents} cents exceeds matured "
                f"balance of {available_cents} cents"
            ),
            code="INSUFFICIENT_BALANCE",
        )
        self.requested_cents = requested_cents
        self.available_cents = available_cents
