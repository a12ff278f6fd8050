# services/vendor_proxy.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from services.exceptions import BadRequestError, MethodNotAllowed, UpdateRejected
from services.sheetdb_client import SheetDBClient

logger = logging.getLogger(__name__)

RESPONSE_VERSION = 1

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}


@dataclass
class ProxyResponse:
    status: int
    json: Any = None


class VendorProxy:
    """
    Stateless request handler sitting between the dashboard and SheetDB.

    ``handle`` never raises: every outcome, including unexpected faults while
    talking to the store, is turned into a status code and a JSON body.
    """

    def __init__(self, sheetdb: SheetDBClient):
        self.sheetdb = sheetdb

    def handle(self, method: str, body: Any = None) -> ProxyResponse:
        method = (method or "").upper()
        if method == "OPTIONS":
            return ProxyResponse(200)

        try:
            if method == "GET":
                return self._read()
            if method == "PATCH":
                return self._update(body)
            raise MethodNotAllowed(method)
        except (MethodNotAllowed, BadRequestError) as e:
            return ProxyResponse(e.status_code, {"error": e.message})
        except UpdateRejected as e:
            return ProxyResponse(e.status_code, {"error": e.message, "details": e.body})
        except Exception as e:
            logger.exception("API Error")
            return ProxyResponse(500, {"error": "Internal Server Error", "details": str(e)})

    def _read(self) -> ProxyResponse:
        sheets = self.sheetdb.fetch_all()
        return ProxyResponse(200, {"version": RESPONSE_VERSION, "sheets": sheets})

    @staticmethod
    def _parse_update(body: Any) -> tuple[str, dict, str | None]:
        if not isinstance(body, dict):
            raise BadRequestError("Missing required data")

        original_supplier = body.get("originalSupplier")
        update_data = body.get("updateData")
        if not original_supplier or not isinstance(original_supplier, str):
            raise BadRequestError("Missing required data")
        if not update_data or not isinstance(update_data, dict):
            raise BadRequestError("Missing required data")

        sheet_name = body.get("sheetName") or None
        return original_supplier, update_data, sheet_name

    def _update(self, body: Any) -> ProxyResponse:
        original_supplier, update_data, sheet_name = self._parse_update(body)

        result = self.sheetdb.update_row(sheet_name, original_supplier, update_data)
        if not result.ok:
            if result.not_found:
                raise UpdateRejected(f"No vendor named '{original_supplier}' was found", result.body)
            raise UpdateRejected("Update was not acknowledged by the spreadsheet", result.body)
        return ProxyResponse(200, result.body)
