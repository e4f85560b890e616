"""Withdrawal service"""

from typing import Any, Dict, List, Optional

from xgate.models.page import Page
from xgate.models.transaction import Transaction
from xgate.services.transactions import TransactionService


class WithdrawService(TransactionService):
    """Withdrawals on ``/withdrawals``"""

    endpoint = "/withdrawals"
    kind = "withdrawal"

    def create_withdrawal(self, transaction: Transaction) -> Transaction:
        return self._create(transaction)

    def get_withdrawal(self, withdrawal_id: str) -> Transaction:
        return self._get(withdrawal_id)

    def list_withdrawals(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Page[Transaction]:
        return self._list(page, limit, filters)

    def search_withdrawals(self, query: str, limit: int = 20) -> List[Transaction]:
        return self._search(query, limit)
