"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a strictly positive monetary amount with an ISO 4217 currency.
    Payment amounts are never zero or negative, so the constructor refuses them.
    """
    amount: Decimal
    currency: str = 'IDR'

    def __post_init__(self):
        try:
            amount = Decimal(str(self.amount))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid amount: {self.amount!r}")
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError(f"Currency must be a 3-letter code, got {self.currency!r}")
        object.__setattr__(self, 'amount', amount)
        object.__setattr__(self, 'currency', self.currency.upper())

    def quantize(self) -> Decimal:
        """Amount rounded to two decimal places, as stored"""
        return self.amount.quantize(Decimal('0.01'))

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"
