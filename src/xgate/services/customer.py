"""Customer service"""

import logging
from typing import Any, Dict, Optional

from xgate.client.http_client import HttpMethod
from xgate.exceptions import ValidationError
from xgate.models.customer import Customer
from xgate.services.base import BaseService, as_record, parse_record
from xgate.utils.masking import mask_value

logger = logging.getLogger(__name__)

ENDPOINT = "/customer"

# Keys that show a response actually carries a customer record
RECORD_KEYS = ("id", "_id", "name", "email")


class CustomerService(BaseService):
    """Create, fetch and update customers"""

    def create(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        document: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Customer:
        """
        Create a customer

        The API may answer with a partial record (or wrap it in
        ``customer``); fields it leaves out are filled from the request.
        """
        if not name:
            raise ValidationError.required("name")
        if not email:
            raise ValidationError.required("email")

        payload: Dict[str, Any] = {"name": name, "email": email}
        if phone is not None:
            payload["phone"] = phone
        if document is not None:
            payload["document"] = document
        if metadata:
            payload["metadata"] = metadata

        logger.info(
            f"Creating customer email={mask_value(email)} "
            f"has_phone={phone is not None} has_document={document is not None}"
        )

        data = as_record(self._request(HttpMethod.POST, ENDPOINT, json=payload))
        record = as_record(data.get("customer", data))

        merged = dict(payload)
        merged.update({k: v for k, v in record.items() if v is not None})
        customer = parse_record(Customer, merged)

        logger.info(f"Customer created id={customer.id}")
        return customer

    def get(self, customer_id: str) -> Customer:
        """Fetch a customer by ID"""
        if not customer_id:
            raise ValidationError.required("customer_id")

        data = self._request(HttpMethod.GET, f"{ENDPOINT}/{customer_id}")
        customer = parse_record(Customer, data)
        logger.debug(f"Customer retrieved id={customer.id}")
        return customer

    def update(self, customer_id: str, update_data: Dict[str, Any]) -> Customer:
        """
        Update a customer and return its current state

        The API usually answers an update with a bare confirmation message,
        in which case the customer is fetched again.
        """
        if not customer_id:
            raise ValidationError.required("customer_id")
        if not update_data:
            raise ValidationError.required("update_data")

        logger.info(f"Updating customer id={customer_id} fields={sorted(update_data)}")

        data = self._request(HttpMethod.PUT, f"{ENDPOINT}/{customer_id}", json=update_data)

        record = data.get("customer", data) if isinstance(data, dict) else None
        if not self._has_record(record):
            return self.get(customer_id)

        customer = parse_record(Customer, record)
        if customer.id is None:
            customer = customer.model_copy(update={"id": customer_id})
        return customer

    def _has_record(self, data: Any) -> bool:
        return isinstance(data, dict) and any(key in data for key in RECORD_KEYS)
