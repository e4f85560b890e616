"""PIX key service"""

import logging
from typing import Any, Dict, List, Optional, Union

from xgate.client.http_client import HttpMethod
from xgate.exceptions import ApiError, ValidationError
from xgate.models.pix_key import PixKey, PixKeyType
from xgate.services.base import BaseService, as_items, parse_record
from xgate.utils.masking import mask_pix_key

logger = logging.getLogger(__name__)

ENDPOINT = "/pix/keys"

# Optional account fields accepted by register()
ACCOUNT_FIELDS = (
    "account_holder_name",
    "account_holder_document",
    "bank_code",
    "account_number",
    "account_type",
)


def _key_type(value: Union[PixKeyType, str]) -> str:
    try:
        return PixKeyType(str(getattr(value, "value", value)).lower()).value
    except ValueError:
        allowed = ", ".join(t.value for t in PixKeyType)
        raise ValidationError.invalid_format("type", f"one of: {allowed}") from None


class PixService(BaseService):
    """Register, query and manage PIX keys"""

    def register(
        self,
        type: Union[PixKeyType, str],
        key: str,
        account_holder_name: Optional[str] = None,
        account_holder_document: Optional[str] = None,
        bank_code: Optional[str] = None,
        account_number: Optional[str] = None,
        account_type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PixKey:
        """Register a new PIX key"""
        key_type = _key_type(type)
        if not key:
            raise ValidationError.required("key")

        payload: Dict[str, Any] = {"type": key_type, "key": key}
        optional = {
            "account_holder_name": account_holder_name,
            "account_holder_document": account_holder_document,
            "bank_code": bank_code,
            "account_number": account_number,
            "account_type": account_type,
        }
        payload.update({name: optional[name] for name in ACCOUNT_FIELDS if optional[name] is not None})
        if metadata:
            payload["metadata"] = metadata

        logger.info(f"Registering PIX key type={key_type} key={mask_pix_key(key_type, key)}")

        data = self._request(HttpMethod.POST, ENDPOINT, json=payload)
        pix_key = parse_record(PixKey, data)
        logger.info(f"PIX key registered id={pix_key.id} status={pix_key.status}")
        return pix_key

    def get(self, pix_key_id: str) -> PixKey:
        if not pix_key_id:
            raise ValidationError.required("pix_key_id")
        data = self._request(HttpMethod.GET, f"{ENDPOINT}/{pix_key_id}")
        return parse_record(PixKey, data)

    def update(self, pix_key_id: str, update_data: Dict[str, Any]) -> PixKey:
        if not pix_key_id:
            raise ValidationError.required("pix_key_id")
        if not update_data:
            raise ValidationError.required("update_data")

        logger.info(f"Updating PIX key id={pix_key_id} fields={sorted(update_data)}")
        data = self._request(HttpMethod.PUT, f"{ENDPOINT}/{pix_key_id}", json=update_data)
        return parse_record(PixKey, data)

    def delete(self, pix_key_id: str) -> bool:
        if not pix_key_id:
            raise ValidationError.required("pix_key_id")
        self._request(HttpMethod.DELETE, f"{ENDPOINT}/{pix_key_id}")
        logger.info(f"PIX key deleted id={pix_key_id}")
        return True

    def list(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[PixKey]:
        """List PIX keys; extra ``filters`` are passed as query parameters"""
        params: Dict[str, Any] = {"page": page, "limit": limit}
        params.update({k: v for k, v in (filters or {}).items() if v is not None})

        data = self._request(HttpMethod.GET, ENDPOINT, params=params)
        return self._to_keys(data, "data")

    def search(self, query: str, limit: int = 10) -> List[PixKey]:
        if not query:
            raise ValidationError.required("query")
        logger.debug(f"Searching PIX keys query={query[:3]}***")
        data = self._request(
            HttpMethod.GET, f"{ENDPOINT}/search", params={"q": query, "limit": limit}
        )
        return self._to_keys(data, "results")

    def find_by_key(self, type: Union[PixKeyType, str], key: str) -> Optional[PixKey]:
        """Look a key up by its value; None when the API does not know it"""
        key_type = _key_type(type)
        if not key:
            raise ValidationError.required("key")

        try:
            data = self._request(
                HttpMethod.GET, f"{ENDPOINT}/find", params={"type": key_type, "key": key}
            )
        except ApiError as e:
            if e.is_not_found:
                logger.debug(f"PIX key not found key={mask_pix_key(key_type, key)}")
                return None
            raise

        if not data:
            return None
        return parse_record(PixKey, data)

    def _to_keys(self, data: Any, envelope: str) -> List[PixKey]:
        return [parse_record(PixKey, item) for item in as_items(data, envelope)]
