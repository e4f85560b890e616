"""Exchange rate and currency conversion service"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Sequence, Union

from xgate.client.http_client import HttpMethod
from xgate.exceptions import ValidationError
from xgate.models.exchange_rate import ExchangeRate
from xgate.services.base import BaseService, as_items, as_record, parse_record

logger = logging.getLogger(__name__)

ENDPOINT_EXCHANGE_RATES = "/exchange-rates"
ENDPOINT_CRYPTO_RATES = "/crypto/rates"
ENDPOINT_COMPANY_CURRENCIES = "/deposit/company/currencies"
ENDPOINT_DEPOSIT_CONVERSION = "/deposit/conversion/tether"


def _code(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationError.required(field)
    return value.strip().upper()


class ExchangeRateService(BaseService):
    """Fiat and crypto quotes, history, and amount conversion"""

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        source = _code(from_currency, "from_currency")
        target = _code(to_currency, "to_currency")

        path = f"{ENDPOINT_EXCHANGE_RATES}/{source}/{target}"
        data = as_record(self._request(HttpMethod.GET, path))
        rate = parse_record(ExchangeRate, {"from_currency": source, "to_currency": target, **data})
        logger.debug(f"Exchange rate {source}/{target} = {rate.rate}")
        return rate

    def get_multiple_rates(
        self, from_currencies: Sequence[str], to_currencies: Sequence[str]
    ) -> List[ExchangeRate]:
        """Quote every from/to pair in a single batch request"""
        if not from_currencies:
            raise ValidationError.required("from_currencies")
        if not to_currencies:
            raise ValidationError.required("to_currencies")

        payload = {
            "from_currencies": [_code(c, "from_currencies") for c in from_currencies],
            "to_currencies": [_code(c, "to_currencies") for c in to_currencies],
        }
        data = self._request(HttpMethod.POST, f"{ENDPOINT_EXCHANGE_RATES}/batch", json=payload)
        return [parse_record(ExchangeRate, item) for item in as_items(data, "rates")]

    def get_crypto_rate(self, crypto_currency: str, fiat_currency: str) -> ExchangeRate:
        crypto = _code(crypto_currency, "crypto_currency")
        fiat = _code(fiat_currency, "fiat_currency")

        data = as_record(self._request(HttpMethod.GET, f"{ENDPOINT_CRYPTO_RATES}/{crypto}/{fiat}"))
        return parse_record(ExchangeRate, {"from_currency": crypto, "to_currency": fiat, **data})

    def get_historical_rates(
        self,
        from_currency: str,
        to_currency: str,
        start_date: str,
        end_date: str,
        interval: str = "daily",
    ) -> Dict[str, Any]:
        """Raw history payload; its ``data`` list holds one entry per interval"""
        source = _code(from_currency, "from_currency")
        target = _code(to_currency, "to_currency")
        params = {"start_date": start_date, "end_date": end_date, "interval": interval}

        data = self._request(
            HttpMethod.GET,
            f"{ENDPOINT_EXCHANGE_RATES}/{source}/{target}/history",
            params=params,
        )
        return as_record(data)

    def convert_amount(
        self,
        amount: Union[Decimal, float, int, str],
        from_currency: str,
        to_currency: str = "USDT",
    ) -> Dict[str, Any]:
        """
        Convert a fiat amount to crypto using the company conversion endpoint

        Looks the source currency up among the company currencies first,
        since the conversion endpoint expects the full currency object.

        Raises:
            ValidationError: ``amount`` is not a positive number, or
                ``from_currency`` is not enabled for the company
        """
        source = _code(from_currency, "from_currency")
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            value = Decimal("NaN")
        if not value.is_finite():
            raise ValidationError.invalid_format("amount", "a number")
        if value <= 0:
            raise ValidationError.invalid_format("amount", "greater than zero")

        currencies = as_items(
            self._request(HttpMethod.GET, ENDPOINT_COMPANY_CURRENCIES), "currencies"
        )
        currency = next(
            (c for c in currencies if str(c.get("name", "")).upper() == source),
            None,
        )
        if currency is None:
            raise ValidationError(
                f"Currency '{source}' not found in company currencies",
                field="from_currency",
                field_errors={"from_currency": [f"{source} is not enabled"]},
            )

        result = as_record(self._request(
            HttpMethod.POST,
            ENDPOINT_DEPOSIT_CONVERSION,
            json={"amount": float(value), "currency": currency},
        ))

        logger.info(
            f"Converted {value} {source} to {result.get('amount', 0)} "
            f"{result.get('crypto', to_currency)}"
        )
        return result
