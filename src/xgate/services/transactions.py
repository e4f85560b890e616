"""Shared implementation of the deposit and withdrawal services"""

import logging
from typing import Any, Dict, List, Optional

from xgate.client.http_client import HttpMethod
from xgate.exceptions import ValidationError
from xgate.models.page import Page
from xgate.models.transaction import Transaction
from xgate.services.base import BaseService, as_items, as_record, clamp, parse_record, pick_filters
from xgate.utils.masking import mask_value

logger = logging.getLogger(__name__)

LIST_FILTERS = ("status", "currency", "from_date", "to_date", "account_id")

MAX_PAGE_SIZE = 100
MAX_SEARCH_SIZE = 50


class TransactionService(BaseService):
    """
    CRUD-style access to one transaction collection

    Subclasses set ``endpoint`` and ``kind`` (the transaction ``type``).
    """

    endpoint: str = ""
    kind: str = ""

    def list_supported_currencies(self) -> List[Any]:
        data = self._request(HttpMethod.GET, f"{self.endpoint}/currencies")
        currencies = data.get("currencies") if isinstance(data, dict) else data
        if not isinstance(currencies, list):
            currencies = []
        logger.debug(f"{self.kind} currencies retrieved count={len(currencies)}")
        return currencies

    def _create(self, transaction: Transaction) -> Transaction:
        if transaction.amount <= 0:
            raise ValidationError.invalid_format("amount", "greater than zero")

        payload = transaction.to_dict()
        payload["type"] = self.kind

        logger.info(
            f"Creating {self.kind} amount={mask_value(payload['amount'])} "
            f"currency={transaction.currency} account={mask_value(transaction.account_id)}"
        )

        data = self._request(HttpMethod.POST, self.endpoint, json=payload)
        created = parse_record(Transaction, data)

        logger.info(f"{self.kind.capitalize()} created id={created.id} status={created.status}")
        return created

    def _get(self, transaction_id: str) -> Transaction:
        if not transaction_id:
            raise ValidationError.required(f"{self.kind}_id")
        data = self._request(HttpMethod.GET, f"{self.endpoint}/{transaction_id}")
        return parse_record(Transaction, data)

    def _list(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Page[Transaction]:
        page = max(1, page)
        limit = clamp(limit, 1, MAX_PAGE_SIZE)
        params: Dict[str, Any] = {"page": page, "limit": limit}
        params.update(pick_filters(filters, LIST_FILTERS))

        data = self._request(HttpMethod.GET, self.endpoint, params=params)
        items = [parse_record(Transaction, item) for item in as_items(data, "data")]
        pagination = as_record(as_record(data).get("pagination")) or {
            "page": page,
            "limit": limit,
            "total": len(items),
            "pages": 1,
        }
        return Page[Transaction](data=items, pagination=pagination)

    def _search(self, query: str, limit: int = 20) -> List[Transaction]:
        if not query:
            raise ValidationError.required("query")
        params = {"q": query, "limit": clamp(limit, 1, MAX_SEARCH_SIZE)}
        data = self._request(HttpMethod.GET, f"{self.endpoint}/search", params=params)
        return [parse_record(Transaction, item) for item in as_items(data, "data")]
