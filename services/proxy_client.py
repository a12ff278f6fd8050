# services/proxy_client.py
from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from services.exceptions import ProxyError
from services.sheetdb_client import SheetCollection
from services.vendor_proxy import RESPONSE_VERSION, VendorProxy

logger = logging.getLogger(__name__)


def _sheets_from_payload(payload: Any) -> SheetCollection:
    """Unwrap the versioned GET body of the vendor proxy."""
    if not isinstance(payload, dict) or payload.get("version") != RESPONSE_VERSION:
        raise ProxyError(f"Unsupported vendor payload (expected version {RESPONSE_VERSION})", payload=payload)
    sheets = payload.get("sheets")
    if not isinstance(sheets, dict):
        raise ProxyError("Vendor payload has no sheets", payload=payload)
    return sheets


def _patch_body(original_supplier: str, update_data: Dict[str, str], sheet_name: str | None) -> dict:
    body = {"originalSupplier": original_supplier, "updateData": update_data}
    if sheet_name:
        body["sheetName"] = sheet_name
    return body


def _acknowledgment(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ProxyError("Update was not acknowledged", payload=payload)
    return payload


class HttpProxyClient:
    """Talks to a vendor proxy deployed elsewhere (e.g. VENDOR_API_URL)."""

    def __init__(self, url: str, timeout: float = 30, http_client=None):
        self.url = url
        self.timeout = timeout
        self.http_client = http_client or requests

    def _call(self, method: str, **kwargs) -> Any:
        try:
            response = self.http_client.request(method, self.url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"Vendor API {method} failed: {e}")
            raise ProxyError(f"Vendor API unreachable: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not 200 <= response.status_code < 300:
            raise ProxyError(f"HTTP {response.status_code}", status=response.status_code, payload=payload)
        return payload

    def get_sheets(self) -> SheetCollection:
        return _sheets_from_payload(self._call("GET"))

    def patch_vendor(self, original_supplier: str, update_data: Dict[str, str], sheet_name: str | None = None):
        return _acknowledgment(self._call("PATCH", json=_patch_body(original_supplier, update_data, sheet_name)))


class InProcessProxyClient:
    """Same contract as ``HttpProxyClient``, but calls the proxy handler directly."""

    def __init__(self, proxy: VendorProxy):
        self.proxy = proxy

    def _call(self, method: str, body=None) -> Any:
        response = self.proxy.handle(method, body)
        if not 200 <= response.status < 300:
            raise ProxyError(f"HTTP {response.status}", status=response.status, payload=response.json)
        return response.json

    def get_sheets(self) -> SheetCollection:
        return _sheets_from_payload(self._call("GET"))

    def patch_vendor(self, original_supplier: str, update_data: Dict[str, str], sheet_name: str | None = None):
        return _acknowledgment(self._call("PATCH", _patch_body(original_supplier, update_data, sheet_name)))
