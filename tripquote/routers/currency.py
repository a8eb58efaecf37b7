"""Currency router: supported currencies and one-off conversions."""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tripquote.data.currency import format_price, is_supported_currency, supported_currencies
from tripquote.dependencies import get_currency_service
from tripquote.schemas.money import ConvertedMoney, Money
from tripquote.services.currency_service import CurrencyService

router = APIRouter()


class ConvertRequest(BaseModel):
    amount: Decimal
    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: str = Field(min_length=3, max_length=3)
    spread: Decimal | None = Field(default=None, ge=0)


class ConvertResponse(ConvertedMoney):
    display: str


@router.get("/supported")
async def list_supported_currencies():
    return {"currencies": supported_currencies()}


@router.post("/convert", response_model=ConvertResponse)
async def convert(
    req: ConvertRequest,
    currency: CurrencyService = Depends(get_currency_service),
):
    """Convert an amount into another currency with the FX spread applied."""
    if not is_supported_currency(req.to_currency):
        raise HTTPException(status_code=400, detail=f"Unsupported currency: {req.to_currency}")

    result = await currency.convert_money(
        Money(amount=req.amount, currency_code=req.from_currency),
        req.to_currency,
        req.spread,
    )
    return ConvertResponse(
        **result.model_dump(),
        display=format_price(result.amount, result.currency_code),
    )
