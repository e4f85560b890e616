"""Models module initialization"""

from xgate.models.customer import Customer
from xgate.models.pix_key import PixKey, PixKeyType
from xgate.models.transaction import Transaction
from xgate.models.exchange_rate import ExchangeRate
from xgate.models.page import Page

__all__ = [
    "Customer",
    "PixKey",
    "PixKeyType",
    "Transaction",
    "ExchangeRate",
    "Page",
]
