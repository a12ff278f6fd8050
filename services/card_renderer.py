# services/card_renderer.py
"""
Projections of View Vendors onto what the dashboard templates draw.

Nothing here holds state; templates receive plain dicts so the markup never
reaches back into the view model.
"""
from __future__ import annotations

from typing import Dict, List

from services.helper import truncate
from services.vendor_view import FIELD_TO_COLUMN, VENDOR_FIELDS, ViewVendor

CARD_BADGE = "Packaging"
DETAIL_BADGE = "Packaging Vendor"

# Labels used on the edit form, in form order
FORM_LABELS: Dict[str, str] = {
    "supplier": "Supplier / Brand",
    "location": "Location (HQ / Plants)",
    "products": "Product Portfolio",
    "gsm": "GSM",
    "coating": "Food-Grade Coating",
    "dishes": "Food Dishes Best Suited",
    "price": "Indicative Price Range",
    "capacity": "Production Capacity",
    "moq": "MOQ",
    "customization": "Customization / Printing",
    "clients": "Existing Clients",
    "usp": "USP / Differentiation",
}

# (label, field, full width) for the detail grid
DETAIL_GRID = [
    ("GSM Range", "gsm", False),
    ("Food-Grade Coating", "coating", False),
    ("Best Suited For", "dishes", True),
    ("Production Capacity", "capacity", False),
    ("Customization", "customization", False),
    ("Existing Clients", "clients", False),
    ("USP / Differentiation", "usp", False),
]


def card_context(vendor: ViewVendor, index: int = 0) -> dict:
    """Summary card for one vendor; ``index`` only drives the entry animation delay."""
    return {
        "vendor_id": vendor.vendor_id,
        "index": index,
        "badge": CARD_BADGE,
        "title": vendor.supplier or "Unknown Vendor",
        "location": truncate(vendor.location, 30) or "N/A",
        "products": vendor.products or "N/A",
        "price": truncate(vendor.price, 15) or "N/A",
        "moq": truncate(vendor.moq, 15) or "N/A",
        "gsm": truncate(vendor.gsm, 15) or "N/A",
        "usp": vendor.usp or "View details for more info",
    }


def render_cards(vendors: List[ViewVendor]) -> List[dict]:
    return [card_context(v, i) for i, v in enumerate(vendors)]


def detail_context(vendor: ViewVendor) -> dict:
    return {
        "vendor_id": vendor.vendor_id,
        "badge": DETAIL_BADGE,
        "title": vendor.supplier or "Unknown Vendor",
        "location": vendor.location or "Location not specified",
        "price": vendor.price or "Contact for pricing",
        "moq": vendor.moq or "N/A",
        "products": vendor.products or "N/A",
        "details": [
            {"label": label, "value": getattr(vendor, name) or "N/A", "full_width": wide}
            for label, name, wide in DETAIL_GRID
        ],
    }


def edit_form_fields(vendor: ViewVendor) -> List[dict]:
    """Rows of the edit form; only the key field is required."""
    return [
        {
            "name": name,
            "label": FORM_LABELS[name],
            "column": FIELD_TO_COLUMN[name],
            "value": getattr(vendor, name),
            "required": name == "supplier",
            "full_width": name == "supplier",
        }
        for name in VENDOR_FIELDS
    ]
