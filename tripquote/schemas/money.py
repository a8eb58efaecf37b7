from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class Money(BaseModel):
    amount: Decimal
    currency_code: str = Field(min_length=3, max_length=3)

    @field_validator("currency_code")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class ConvertedMoney(BaseModel):
    """A price snapshot in the preferred currency, keeping the original for reference."""

    amount: Decimal
    currency_code: str
    original_amount: Decimal
    original_currency_code: str
    spread_applied: Decimal = Decimal("0")
    unconverted: bool = False

    @classmethod
    def identity(cls, money: Money) -> "ConvertedMoney":
        return cls(
            amount=money.amount,
            currency_code=money.currency_code,
            original_amount=money.amount,
            original_currency_code=money.currency_code,
        )

    @property
    def original(self) -> Money:
        return Money(amount=self.original_amount, currency_code=self.original_currency_code)
