"""Money value object: integer minor units plus an ISO 4217 currency code."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from orders.domain import orders
from orders.exceptions import CurrencyMismatch


@orders.value_object
class Money:
    """An amount in the currency's smallest unit (e.g. cents, won).

    Amounts are never fractional and never negative; arithmetic returns new
    values and refuses to mix currencies. Build instances with ``Money.of`` so
    the currency code is normalized to upper case.
    """

    amount: Integer(required=True, min_value=0)
    currency: String(required=True, max_length=3, min_length=3)

    @invariant.post
    def currency_must_be_an_upper_case_code(self):
        if self.currency != self.currency.upper():
            raise ValidationError({"currency": [f"Currency must be upper case: {self.currency}"]})

    @classmethod
    def of(cls, amount, currency) -> "Money":
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError({"amount": ["Amount must be an integer number of minor units"]})
        if amount < 0:
            raise ValidationError({"amount": ["Amount must be greater than or equal to zero"]})
        if not isinstance(currency, str) or len(currency) != 3:
            raise ValidationError({"currency": ["Currency must be a 3-letter ISO code"]})
        return cls(amount=amount, currency=currency.upper())

    @classmethod
    def zero(cls, currency) -> "Money":
        return cls.of(0, currency)

    def add(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise CurrencyMismatch(
                {"currency": [f"Cannot add {other.currency} to {self.currency}"]},
            )
        return Money.of(self.amount + other.amount, self.currency)

    def multiply(self, multiplier) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier <= 0:
            raise ValidationError({"quantity": ["Multiplier must be a positive integer"]})
        return Money.of(self.amount * multiplier, self.currency)

    def equals(self, other) -> bool:
        return isinstance(other, Money) and self.amount == other.amount and self.currency == other.currency

    def to_payload(self) -> dict:
        return {"amount": self.amount, "currency": self.currency}
