# /app/__init__.py
import os
import logging
from flask import Flask, jsonify, request
from dotenv import load_dotenv
from config import ProductionConfig
from services.config_service import ConfigManager
from services.sheetdb_client import SheetDBClient
from services.vendor_proxy import CORS_HEADERS, VendorProxy
from services.proxy_client import HttpProxyClient, InProcessProxyClient
from services.vendor_view import VendorViewModel
from services.edit_submitter import EditSubmitter
from app.routes import api_bp, dashboard_bp


load_dotenv()

# Settings that may come from the environment (.env) instead of config.py
ENV_OVERRIDES = ("SHEETDB_API_URL", "VENDOR_API_URL")


def init_sentry():
    """Initialize Sentry error tracking if SENTRY_DSN is configured."""
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        environment = os.getenv("FLASK_ENV") or os.getenv("ENV") or "development"

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            integrations=[
                FlaskIntegration(),
                LoggingIntegration(
                    level=logging.INFO,       # Capture info and above as breadcrumbs
                    event_level=logging.ERROR  # Send errors and above as events
                ),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            attach_stacktrace=True,
            debug=os.getenv("SENTRY_DEBUG", "0") == "1",
        )
        logging.info(f"Sentry initialized for environment: {environment}")
    except ImportError:
        logging.warning("sentry-sdk not installed, error tracking disabled")
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")


def init_vendor_services(app, config_manager: ConfigManager, http_client=None):
    """
    Wire adapter -> proxy -> proxy client -> view model -> edit submitter
    and keep them in ``app.extensions``.

    ``http_client`` replaces ``requests`` for the SheetDB adapter (tests pass a fake).
    """
    timeout = config_manager.get("sheetdb.timeout", default=30)

    sheetdb = SheetDBClient(
        base_url=app.config["SHEETDB_API_URL"],
        sheets=config_manager.get("sheetdb.sheets") or ["Sheet1", "Sheet2"],
        key_column=config_manager.get("sheetdb.key_column", default="Supplier / Brand"),
        key_encoding=config_manager.get("sheetdb.key_encoding", default="query"),
        timeout=timeout,
        http_client=http_client,
    )
    proxy = VendorProxy(sheetdb)

    if app.config.get("VENDOR_API_URL"):
        proxy_client = HttpProxyClient(app.config["VENDOR_API_URL"], timeout=timeout)
        logging.info("Dashboard uses the vendor API at %s", app.config["VENDOR_API_URL"])
    else:
        proxy_client = InProcessProxyClient(proxy)

    view_model = VendorViewModel(proxy_client)

    app.extensions["config_manager"] = config_manager
    app.extensions["vendor_proxy"] = proxy
    app.extensions["proxy_client"] = proxy_client
    app.extensions["vendor_view"] = view_model
    app.extensions["edit_submitter"] = EditSubmitter(view_model, proxy_client)


def register_api_handlers(app):
    """
    CORS and JSON errors for everything under /api/, including requests that
    never reach a view (unknown method or path).
    """

    @app.after_request
    def add_cors_headers(response):
        if request.path.startswith("/api/"):
            for header, value in CORS_HEADERS.items():
                response.headers[header] = value
        return response

    @app.errorhandler(405)
    def method_not_allowed(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Method not allowed"}), 405
        return e


def create_app(config_name: str = "", http_client=None, config_path: str = "config.json"):
    # Initialize Sentry before creating app to catch initialization errors
    init_sentry()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(ProductionConfig)

    # Secret
    app.secret_key = os.getenv("FLASK_SECRET", os.urandom(24))

    if config_name:
        app.config.from_object(f"config.{config_name}Config")

    # JSON config (sheet names, key column, dashboard timings)
    config_manager = ConfigManager(config_path)

    if not app.config.get("TESTING"):
        for key in ENV_OVERRIDES:
            if os.getenv(key):
                app.config[key] = os.getenv(key)

    # Logging (basic)
    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # prevent duplicate handlers in some reload scenarios
    )
    logging.debug("sheetdb=%s  vendor_api=%s", app.config["SHEETDB_API_URL"], app.config.get("VENDOR_API_URL") or "in-process")

    init_vendor_services(app, config_manager, http_client=http_client)

    # Blueprints
    app.register_blueprint(api_bp)
    app.register_blueprint(dashboard_bp)
    register_api_handlers(app)

    return app
