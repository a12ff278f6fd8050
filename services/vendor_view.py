# services/vendor_view.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from services.exceptions import ProxyError, VendorNotFound
from services.helper import generate_unique_id
from services.sheetdb_client import RowRecord

logger = logging.getLogger(__name__)

# Spreadsheet column -> View Vendor field
COLUMN_MAP: Dict[str, str] = {
    "Supplier / Brand": "supplier",
    "Location (HQ / Plants)": "location",
    "Product Portfolio": "products",
    "GSM": "gsm",
    "Food-Grade Coating": "coating",
    "Food Dishes Best Suited": "dishes",
    "Indicative Price Range": "price",
    "Production capacities (Per month)": "capacity",
    "MOQ": "moq",
    "Customization / Printing": "customization",
    "Existing Clients / Segments": "clients",
    "USP / Differentiation": "usp",
}
FIELD_TO_COLUMN: Dict[str, str] = {v: k for k, v in COLUMN_MAP.items()}
VENDOR_FIELDS: List[str] = list(COLUMN_MAP.values())


@dataclass
class ViewVendor:
    """UI-facing projection of one spreadsheet row."""
    supplier: str = ""
    location: str = ""
    products: str = ""
    gsm: str = ""
    coating: str = ""
    dishes: str = ""
    price: str = ""
    capacity: str = ""
    moq: str = ""
    customization: str = ""
    clients: str = ""
    usp: str = ""
    original: RowRecord = field(default_factory=dict, repr=False)
    sheet: str = ""
    vendor_id: str = field(default_factory=generate_unique_id)

    @classmethod
    def from_row(cls, row: RowRecord, sheet: str = "") -> "ViewVendor":
        values = {}
        for column, name in COLUMN_MAP.items():
            value = row.get(column)
            values[name] = "" if value is None else str(value)
        return cls(original=row, sheet=sheet, **values)

    def field_values(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in VENDOR_FIELDS}

    def search_text(self) -> str:
        return " ".join(self.field_values().values()).lower()

    def matches(self, search: str = "", location: str = "", customization: str = "") -> bool:
        if search and search.lower() not in self.search_text():
            return False
        if location and location not in self.location:
            return False
        if customization and self.customization != customization:
            return False
        return True


def location_facet(location: str) -> str:
    """'Mumbai / Pune plant' -> 'Mumbai'"""
    return (location or "").split("/")[0].strip()


class VendorViewModel:
    """
    In-memory store of the vendors currently shown on the dashboard.

    Owns the row set, the derived facet options and the load state. Vendors
    are addressed by ``vendor_id`` which survives refiltering; a reload mints
    new ids, so stale links resolve to ``VendorNotFound`` instead of the
    wrong vendor.
    """

    def __init__(self, proxy_client):
        self.proxy_client = proxy_client
        self.vendors: List[ViewVendor] = []
        self.locations: List[str] = []
        self.customizations: List[str] = []
        self.loaded = False
        self.load_error: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def total(self) -> int:
        return len(self.vendors)

    def load(self) -> bool:
        """Fetch through the proxy and rebuild vendors and facets. Returns False on failure."""
        try:
            sheets = self.proxy_client.get_sheets()
        except ProxyError as e:
            logger.error(f"Loading vendors failed: {e.message}")
            with self._lock:
                self.vendors, self.locations, self.customizations = [], [], []
                self.loaded = False
                self.load_error = e.message
            return False

        self.populate(sheets)
        return True

    def populate(self, sheets: Dict[str, List[RowRecord]]) -> None:
        vendors = [
            ViewVendor.from_row(row, sheet=sheet_name)
            for sheet_name, rows in sheets.items()
            for row in rows
        ]
        vendors = [v for v in vendors if v.supplier.strip()]

        with self._lock:
            self.vendors = vendors
            self._refresh_facets()
            self.loaded = True
            self.load_error = None

        logger.info(f"Loaded {len(vendors)} vendors from {len(sheets)} sheet(s)")

    def _refresh_facets(self) -> None:
        self.locations = sorted({location_facet(v.location) for v in self.vendors} - {""})
        self.customizations = sorted({v.customization for v in self.vendors} - {""})

    def apply_filters(self, search: str = "", location: str = "", customization: str = "") -> List[ViewVendor]:
        """
        Vendors whose text contains ``search`` (case-insensitive, taken as typed),
        whose location contains ``location`` and whose customization equals
        ``customization``. Empty arguments, and a search of only spaces, do not filter.
        """
        search = search or ""
        if not search.strip():
            search = ""
        with self._lock:
            return [v for v in self.vendors if v.matches(search, location or "", customization or "")]

    def get(self, vendor_id: str) -> ViewVendor:
        with self._lock:
            for vendor in self.vendors:
                if vendor.vendor_id == vendor_id:
                    return vendor
        raise VendorNotFound(vendor_id)

    def apply_edit(self, vendor_id: str, updated_fields: Dict[str, str]) -> ViewVendor:
        """
        Overwrite the vendor's fields and the matching columns of its backing row.

        ``updated_fields`` is keyed by View Vendor field name; unknown keys are ignored.
        """
        vendor = self.get(vendor_id)
        with self._lock:
            for name, value in updated_fields.items():
                if name not in FIELD_TO_COLUMN:
                    continue
                setattr(vendor, name, value)
                vendor.original[FIELD_TO_COLUMN[name]] = value
            self._refresh_facets()
        return vendor


def to_update_data(updated_fields: Dict[str, str]) -> Dict[str, str]:
    """Field name keyed values -> spreadsheet column keyed values, in column order."""
    return {
        column: updated_fields[name]
        for column, name in COLUMN_MAP.items()
        if name in updated_fields
    }
