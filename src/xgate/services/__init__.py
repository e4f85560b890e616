"""Services module initialization"""

from xgate.services.base import AuthenticatedRequest
from xgate.services.customer import CustomerService
from xgate.services.pix import PixService
from xgate.services.deposit import DepositService
from xgate.services.withdraw import WithdrawService
from xgate.services.exchange_rate import ExchangeRateService

__all__ = [
    "AuthenticatedRequest",
    "CustomerService",
    "PixService",
    "DepositService",
    "WithdrawService",
    "ExchangeRateService",
]
