from unittest.mock import MagicMock

import pytest

from services.exceptions import ProxyError, VendorNotFound
from services.vendor_view import COLUMN_MAP, VENDOR_FIELDS, VendorViewModel, ViewVendor, location_facet, to_update_data


@pytest.fixture
def proxy_client(sample_rows):
    client = MagicMock()
    client.get_sheets.return_value = sample_rows
    return client


@pytest.fixture
def loaded(proxy_client):
    vm = VendorViewModel(proxy_client)
    assert vm.load() is True
    return vm


def test_single_row_scenario():
    client = MagicMock()
    client.get_sheets.return_value = {"Sheet1": [{"Supplier / Brand": "Acme", "GSM": "200"}]}
    vm = VendorViewModel(client)

    vm.load()

    assert vm.total == 1
    vendor = vm.vendors[0]
    assert vendor.supplier == "Acme"
    assert vendor.gsm == "200"
    for name in VENDOR_FIELDS:
        if name not in ("supplier", "gsm"):
            assert getattr(vendor, name) == ""


def test_blank_suppliers_are_dropped(loaded, sample_rows):
    all_rows = [row for rows in sample_rows.values() for row in rows]
    keyed = [r for r in all_rows if (r.get("Supplier / Brand") or "").strip()]

    assert loaded.total == len(keyed) == 3
    assert [v.supplier for v in loaded.vendors] == ["Acme Packaging", "Leafware", "Bagasse Co"]


def test_vendors_remember_their_sheet_and_row(loaded, sample_rows):
    bagasse = loaded.vendors[2]
    assert bagasse.sheet == "Sheet2"
    assert bagasse.original is sample_rows["Sheet2"][0]
    assert bagasse.original["Food-Grade Coating"] == "PLA"


def test_facets_are_sorted_and_deduplicated(loaded):
    assert loaded.locations == ["Bengaluru", "Mumbai"]
    assert loaded.customizations == ["Full", "Limited"]


def test_location_facet_takes_first_segment():
    assert location_facet("Mumbai / Pune") == "Mumbai"
    assert location_facet("  Chennai  ") == "Chennai"
    assert location_facet("") == ""


@pytest.mark.parametrize("search", ["", "acme", "PLATES", "mumbai", "full", "zzz", " leaf ", "leafware "])
def test_search_results_are_a_matching_subset(loaded, search):
    result = loaded.apply_filters(search=search)

    assert all(v in loaded.vendors for v in result)
    needle = search.lower()
    for vendor in result:
        assert needle in " ".join(vendor.field_values().values()).lower()


def test_search_is_not_trimmed():
    client = MagicMock()
    client.get_sheets.return_value = {"Sheet1": [{"Supplier / Brand": "Acme", "USP / Differentiation": "eco"}]}
    vm = VendorViewModel(client)
    vm.load()

    assert [v.supplier for v in vm.apply_filters(search="eco")] == ["Acme"]
    assert vm.apply_filters(search="eco ") == []


def test_whitespace_only_search_does_not_filter(loaded):
    assert loaded.apply_filters(search="   ") == loaded.vendors


def test_search_preserves_order(loaded):
    result = loaded.apply_filters(search="mumbai")
    assert [v.supplier for v in result] == ["Acme Packaging", "Bagasse Co"]


def test_location_is_substring_and_customization_exact(loaded):
    assert [v.supplier for v in loaded.apply_filters(location="Mumbai")] == ["Acme Packaging", "Bagasse Co"]
    assert [v.supplier for v in loaded.apply_filters(customization="Full")] == ["Acme Packaging", "Bagasse Co"]
    assert loaded.apply_filters(customization="Ful") == []
    assert [v.supplier for v in loaded.apply_filters(search="clam", location="Mumbai", customization="Full")] == ["Bagasse Co"]


def test_filtering_never_mutates_rows(loaded):
    before = [dict(v.original) for v in loaded.vendors]
    loaded.apply_filters(search="acme", location="Mumbai", customization="Full")
    assert [v.original for v in loaded.vendors] == before


def test_apply_edit_updates_vendor_and_row_in_lockstep(loaded):
    vendor = loaded.vendors[0]
    order = [v.vendor_id for v in loaded.vendors]

    loaded.apply_edit(vendor.vendor_id, {"gsm": "250", "customization": "None"})

    assert vendor.gsm == "250"
    assert vendor.original["GSM"] == "250"
    assert vendor.original["Customization / Printing"] == "None"
    assert [v.vendor_id for v in loaded.vendors] == order
    assert "None" in loaded.customizations


def test_apply_edit_ignores_unknown_fields(loaded):
    vendor = loaded.vendors[1]
    loaded.apply_edit(vendor.vendor_id, {"colour": "green"})
    assert "colour" not in vendor.original


def test_ids_are_stable_across_filters_but_not_reloads(loaded):
    vendor_id = loaded.apply_filters(search="leaf")[0].vendor_id
    assert loaded.get(vendor_id).supplier == "Leafware"

    loaded.load()
    with pytest.raises(VendorNotFound):
        loaded.get(vendor_id)


def test_load_failure_records_error(proxy_client):
    proxy_client.get_sheets.side_effect = ProxyError("HTTP 500", status=500)
    vm = VendorViewModel(proxy_client)

    assert vm.load() is False
    assert vm.loaded is False
    assert vm.load_error == "HTTP 500"
    assert vm.vendors == []


def test_successful_reload_clears_error(proxy_client, sample_rows):
    proxy_client.get_sheets.side_effect = [ProxyError("HTTP 500", status=500), sample_rows]
    vm = VendorViewModel(proxy_client)

    vm.load()
    vm.load()

    assert vm.loaded is True
    assert vm.load_error is None
    assert vm.total == 3


def test_from_row_stringifies_values():
    vendor = ViewVendor.from_row({"Supplier / Brand": "Acme", "MOQ": 5000, "GSM": None})
    assert vendor.moq == "5000"
    assert vendor.gsm == ""


def test_to_update_data_uses_column_names():
    data = to_update_data({"gsm": "250", "supplier": "Acme"})
    assert data == {"Supplier / Brand": "Acme", "GSM": "250"}
    assert set(COLUMN_MAP.values()) == set(VENDOR_FIELDS)
