# services/sheetdb_client.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import quote

import requests

from services.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

RowRecord = Dict[str, str]
SheetCollection = Dict[str, List[RowRecord]]

DEFAULT_KEY_COLUMN = "Supplier / Brand"
KEY_ENCODINGS = ("query", "path")


@dataclass
class UpdateResult:
    """Outcome of a row update as reported by SheetDB."""
    ok: bool
    status: int
    body: Any = field(default_factory=dict)

    @property
    def not_found(self) -> bool:
        return self.status == 404


def normalize_sheets(payload: Any, default_sheet: str = "Sheet1") -> SheetCollection:
    """
    Reshape whatever the store returned into ``{sheet name: [row, ...]}``.

    A bare list is taken to be the rows of ``default_sheet``. In a mapping,
    any sheet whose value is not a list becomes an empty list. Rows that are
    not objects are dropped.
    """
    if isinstance(payload, list):
        payload = {default_sheet: payload}
    if not isinstance(payload, dict):
        logger.warning(f"Unexpected sheet payload of type {type(payload).__name__}; treating as empty")
        return {default_sheet: []}

    out: SheetCollection = {}
    for name, rows in payload.items():
        if not isinstance(rows, list):
            logger.warning(f"Sheet '{name}' did not return a list of rows; substituting an empty sheet")
            out[str(name)] = []
            continue
        out[str(name)] = [row for row in rows if isinstance(row, dict)]
    return out


def is_acknowledged(body: Any) -> bool:
    """An update counts when SheetDB reports a positive ``updated`` count or echoes ``data``."""
    if not isinstance(body, dict):
        return False
    if "data" in body:
        return True
    try:
        return int(body.get("updated", 0)) > 0
    except (TypeError, ValueError):
        return False


class SheetDBClient:
    """
    Thin client for the SheetDB REST API sitting in front of the vendor sheet.

    Attributes:
        base_url (str): The SheetDB API endpoint, e.g. https://sheetdb.io/api/v1/<id>
        sheets (list[str]): Sheet (tab) names read by ``fetch_all``.
        key_column (str): Column used to locate a row for updates.
        key_encoding (str): "query" puts the key column and value in the query
            string; "path" percent-encodes both as path segments.
    """

    def __init__(
            self,
            base_url: str,
            sheets: List[str] | None = None,
            key_column: str = DEFAULT_KEY_COLUMN,
            key_encoding: str = "query",
            timeout: float = 30,
            http_client=None,
    ):
        if not base_url:
            raise ValueError("SheetDB base URL is required")
        if key_encoding not in KEY_ENCODINGS:
            raise ValueError(f"Unrecognised key encoding: {key_encoding}")

        self.base_url = base_url.rstrip("/")
        self.sheets = list(sheets or ["Sheet1"])
        self.key_column = key_column
        self.key_encoding = key_encoding
        self.timeout = timeout
        self.http_client = http_client or requests

    @property
    def default_sheet(self) -> str:
        return self.sheets[0]

    def _fetch_sheet(self, sheet_name: str) -> Any:
        """Return the decoded payload of one sheet, or None when that sheet answered badly."""
        try:
            response = self.http_client.get(self.base_url, params={"sheet": sheet_name}, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            logger.warning(f"Sheet '{sheet_name}' could not be read ({e}); substituting an empty sheet")
            return None
        except ValueError as e:
            logger.warning(f"Sheet '{sheet_name}' returned invalid JSON ({e}); substituting an empty sheet")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"Request for sheet '{sheet_name}' failed: {e}")
            raise UpstreamFailure(f"Could not read sheet '{sheet_name}': {e}") from e

    def fetch_all(self) -> SheetCollection:
        """
        Read every configured sheet in parallel.

        A sheet that answers with an HTTP error or a body that is not JSON
        comes back as an empty list so the other sheets still load.

        Returns:
            dict: sheet name -> rows, in configured sheet order.

        Raises:
            UpstreamFailure: On a transport error, or when no sheet could be read.
        """
        with ThreadPoolExecutor(max_workers=len(self.sheets)) as pool:
            payloads = list(pool.map(self._fetch_sheet, self.sheets))

        if all(payload is None for payload in payloads):
            raise UpstreamFailure(f"None of the sheets could be read: {', '.join(self.sheets)}")

        collection: SheetCollection = {}
        for name, payload in zip(self.sheets, payloads):
            if payload is None:
                collection[name] = []
                continue
            collection.update(normalize_sheets({name: payload}, default_sheet=name))

        logger.debug(
            "Fetched %s",
            ", ".join(f"{name}={len(rows)}" for name, rows in collection.items()),
        )
        return collection

    def _update_request(self, sheet: str, key_value: str) -> tuple[str, dict]:
        if self.key_encoding == "path":
            url = f"{self.base_url}/{quote(self.key_column, safe='')}/{quote(key_value, safe='')}"
            return url, {"sheet": sheet}
        return self.base_url, {"column": self.key_column, "value": key_value, "sheet": sheet}

    def update_row(self, sheet: str | None, key_value: str, updated_fields: Dict[str, str]) -> UpdateResult:
        """
        Overwrite the given columns of the row whose key column equals ``key_value``.

        A key that matches no row is reported as ``UpdateResult(ok=False, status=404)``
        rather than raised.

        Raises:
            UpstreamFailure: On transport errors or a non-JSON answer.
        """
        sheet = sheet or self.default_sheet
        url, params = self._update_request(sheet, key_value)

        try:
            response = self.http_client.patch(
                url,
                params=params,
                json={"data": updated_fields},
                timeout=self.timeout,
            )
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Update of '{key_value}' in '{sheet}' failed: {e}")
            raise UpstreamFailure(f"Could not update '{key_value}': {e}") from e
        except ValueError as e:
            logger.error(f"Update of '{key_value}' returned invalid JSON: {e}")
            raise UpstreamFailure(f"Invalid JSON from update of '{key_value}': {e}") from e

        status = getattr(response, "status_code", 200)
        if is_acknowledged(body):
            logger.info(f"Updated '{key_value}' in sheet '{sheet}'")
            return UpdateResult(ok=True, status=status, body=body)

        if isinstance(body, dict) and "updated" in body:
            logger.warning(f"No row in '{sheet}' has {self.key_column} = '{key_value}'")
            return UpdateResult(ok=False, status=404, body=body)

        logger.warning(f"Update of '{key_value}' was not acknowledged: {body}")
        return UpdateResult(ok=False, status=status if status >= 400 else 400, body=body)
