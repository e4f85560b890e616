"""Deposit service"""

from typing import Any, Dict, List, Optional

from xgate.models.page import Page
from xgate.models.transaction import Transaction
from xgate.services.transactions import TransactionService


class DepositService(TransactionService):
    """Deposits on ``/deposits``"""

    endpoint = "/deposits"
    kind = "deposit"

    def create_deposit(self, transaction: Transaction) -> Transaction:
        return self._create(transaction)

    def get_deposit(self, deposit_id: str) -> Transaction:
        return self._get(deposit_id)

    def list_deposits(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Page[Transaction]:
        """List deposits; page size is clamped to 1..100"""
        return self._list(page, limit, filters)

    def search_deposits(self, query: str, limit: int = 20) -> List[Transaction]:
        return self._search(query, limit)
