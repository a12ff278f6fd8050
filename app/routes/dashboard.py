# app/routes/dashboard.py
from __future__ import annotations

import logging
from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from services.card_renderer import detail_context, edit_form_fields, render_cards
from services.edit_submitter import EditOutcome
from services.exceptions import BadRequestError, VendorNotFound

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)

SAVED_MESSAGE = "Vendor updated successfully!"
LOCAL_ONLY_MESSAGE = "Changes saved locally! To update Google Sheet, edit directly in the spreadsheet."
STALE_MESSAGE = "That vendor is no longer in the list. It may have changed after a reload."


def _view_model():
    return current_app.extensions["vendor_view"]


def _dashboard_settings() -> dict:
    cfg = current_app.extensions["config_manager"]
    return {
        "search_debounce_ms": cfg.get("dashboard.search_debounce_ms", default=300),
        "notification_ms": cfg.get("dashboard.notification_ms", default=4000),
    }


def _filters() -> dict:
    return {
        "q": request.args.get("q", ""),
        "location": request.args.get("location", ""),
        "customization": request.args.get("customization", ""),
    }


@dashboard_bp.route("/", methods=["GET"])
def index():
    """Vendor cards with search and facet filters."""
    vm = _view_model()
    if not vm.loaded:
        vm.load()

    if vm.load_error:
        return render_template(
            "dashboard.html",
            load_error=vm.load_error,
            filters=_filters(),
            settings=_dashboard_settings(),
        )

    filters = _filters()
    visible = vm.apply_filters(filters["q"], filters["location"], filters["customization"])

    return render_template(
        "dashboard.html",
        load_error=None,
        cards=render_cards(visible),
        total=vm.total,
        filtered=len(visible),
        locations=vm.locations,
        customizations=vm.customizations,
        filters=filters,
        settings=_dashboard_settings(),
    )


@dashboard_bp.route("/reload", methods=["POST"])
def reload():
    """Full reload from the spreadsheet; also the Retry action of the error panel."""
    if _view_model().load():
        flash(f"Loaded {_view_model().total} vendors", "success")
    return redirect(url_for("dashboard.index"))


@dashboard_bp.route("/vendors/<vendor_id>", methods=["GET"])
def vendor_detail(vendor_id):
    try:
        vendor = _view_model().get(vendor_id)
    except VendorNotFound:
        flash(STALE_MESSAGE, "warning")
        return redirect(url_for("dashboard.index"))

    return render_template(
        "vendor_detail.html",
        vendor=detail_context(vendor),
        settings=_dashboard_settings(),
        back_query=request.args.to_dict(),
    )


def _flash_outcome(outcome: EditOutcome):
    if outcome.persisted:
        flash(SAVED_MESSAGE, "success")
    else:
        flash(LOCAL_ONLY_MESSAGE, "warning")


@dashboard_bp.route("/vendors/<vendor_id>/edit", methods=["GET", "POST"])
def vendor_edit(vendor_id):
    vm = _view_model()
    try:
        vendor = vm.get(vendor_id)
    except VendorNotFound:
        flash(STALE_MESSAGE, "warning")
        return redirect(url_for("dashboard.index"))

    if request.method == "GET":
        return render_template(
            "vendor_edit.html",
            vendor_id=vendor_id,
            fields=edit_form_fields(vendor),
            settings=_dashboard_settings(),
        )

    submitter = current_app.extensions["edit_submitter"]
    try:
        outcome = submitter.submit(vendor_id, request.form)
    except BadRequestError as e:
        flash(e.message, "danger")
        # Re-render with the submitted values, not the stored ones
        fields = edit_form_fields(vendor)
        for field in fields:
            field["value"] = request.form.get(field["name"], "")
        return render_template(
            "vendor_edit.html",
            vendor_id=vendor_id,
            fields=fields,
            settings=_dashboard_settings(),
        ), 400
    except VendorNotFound:
        flash(STALE_MESSAGE, "warning")
        return redirect(url_for("dashboard.index"))

    _flash_outcome(outcome)
    return redirect(url_for("dashboard.vendor_detail", vendor_id=vendor_id))
