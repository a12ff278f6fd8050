import copy

import pytest
import requests

from app import create_app


class FakeResponse:
    """Just enough of requests.Response for the SheetDB and proxy clients."""

    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSheetDB:
    """
    Stands in for the ``requests`` module in front of SheetDB.

    ``sheets`` maps sheet name -> rows (or any JSON for a malformed sheet).
    ``statuses`` maps sheet name -> HTTP status for sheets that should fail.
    PATCH calls are recorded in ``patches`` and answered with ``ack``.
    """

    def __init__(self, sheets=None, ack=None):
        self.sheets = sheets if sheets is not None else {}
        self.ack = {"updated": 1} if ack is None else ack
        self.statuses = {}
        self.gets = []
        self.patches = []
        self.fail_with = None

    def get(self, url, params=None, timeout=None):
        self.gets.append({"url": url, "params": params, "timeout": timeout})
        if self.fail_with is not None:
            raise self.fail_with
        sheet = (params or {}).get("sheet")
        if sheet in self.statuses:
            return FakeResponse({"error": "Sheet not found"}, status_code=self.statuses[sheet])
        return FakeResponse(copy.deepcopy(self.sheets.get(sheet, [])))

    def patch(self, url, params=None, json=None, timeout=None):
        self.patches.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.fail_with is not None:
            raise self.fail_with
        return FakeResponse(self.ack)


def vendor_row(supplier="Acme", **columns):
    row = {"Supplier / Brand": supplier}
    row.update(columns)
    return row


@pytest.fixture
def sample_rows():
    return {
        "Sheet1": [
            vendor_row(
                "Acme Packaging",
                **{
                    "Location (HQ / Plants)": "Mumbai / Pune",
                    "Product Portfolio": "Paper plates, bowls",
                    "GSM": "200-350",
                    "Customization / Printing": "Full",
                    "Indicative Price Range": "Rs 1-3 per piece",
                    "MOQ": "10,000 units",
                },
            ),
            vendor_row(
                "Leafware",
                **{
                    "Location (HQ / Plants)": "Bengaluru",
                    "Product Portfolio": "Areca leaf plates",
                    "Customization / Printing": "Limited",
                },
            ),
            vendor_row("   ", **{"Location (HQ / Plants)": "Nowhere"}),
        ],
        "Sheet2": [
            vendor_row(
                "Bagasse Co",
                **{
                    "Location (HQ / Plants)": "Mumbai",
                    "Product Portfolio": "Clamshells",
                    "Customization / Printing": "Full",
                    "Food-Grade Coating": "PLA",
                },
            ),
            {"Location (HQ / Plants)": "Delhi"},
        ],
    }


@pytest.fixture
def fake_sheetdb(sample_rows):
    return FakeSheetDB(sheets=sample_rows)


@pytest.fixture
def app(fake_sheetdb):
    """Flask app wired to the fake SheetDB, with the proxy called in-process."""
    app = create_app("Testing", http_client=fake_sheetdb)
    app.config.update(SECRET_KEY="testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def view_model(app):
    return app.extensions["vendor_view"]
