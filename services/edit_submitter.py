# services/edit_submitter.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from services.exceptions import BadRequestError, ProxyError
from services.vendor_view import FIELD_TO_COLUMN, VENDOR_FIELDS, VendorViewModel, ViewVendor, to_update_data

logger = logging.getLogger(__name__)

PERSISTED = "persisted"
LOCAL_ONLY = "local_only"


@dataclass
class EditOutcome:
    """Result of an edit: always applied locally, persisted only when the proxy acknowledged it."""
    vendor: ViewVendor
    state: str
    update_data: Dict[str, str]
    response: Any = None
    error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.state == PERSISTED


class EditSubmitter:
    """
    Two-tier commit of an edit form.

    The edit is applied to the view model first, then synced to the
    spreadsheet through the proxy. A failed sync leaves the local change in
    place and reports ``local_only``.
    """

    def __init__(self, view_model: VendorViewModel, proxy_client):
        self.view_model = view_model
        self.proxy_client = proxy_client

    @staticmethod
    def build_fields(form: Mapping[str, Any]) -> Dict[str, str]:
        return {name: str(form.get(name) or "") for name in VENDOR_FIELDS}

    def submit(self, vendor_id: str, form: Mapping[str, Any]) -> EditOutcome:
        """
        Raises:
            BadRequestError: If the supplier field is empty.
            VendorNotFound: If ``vendor_id`` no longer resolves.
        """
        updated_fields = self.build_fields(form)
        if not updated_fields["supplier"].strip():
            raise BadRequestError("Supplier / Brand is required")

        vendor = self.view_model.get(vendor_id)
        # Key value as the spreadsheet knows it, captured before the local apply
        original_supplier = vendor.original.get(FIELD_TO_COLUMN["supplier"]) or vendor.supplier
        sheet_name = vendor.sheet or None
        update_data = to_update_data(updated_fields)

        self.view_model.apply_edit(vendor_id, updated_fields)

        try:
            response = self.proxy_client.patch_vendor(original_supplier, update_data, sheet_name)
        except ProxyError as e:
            logger.warning(f"Edit of '{original_supplier}' kept locally only: {e.message}")
            return EditOutcome(vendor, LOCAL_ONLY, update_data, response=e.payload, error=e.message)

        logger.info(f"Edit of '{original_supplier}' persisted")
        return EditOutcome(vendor, PERSISTED, update_data, response=response)
