import json
import os
import logging


# Configure logging
logger = logging.getLogger(__name__)


class ConfigManager:
    """
    File-backed settings for the vendor dashboard.

    Reads ``config.json`` from the project root. A missing file yields an empty
    config; an invalid one is logged and its parse error kept in
    ``last_load_error`` so callers can explain what went wrong.
    """

    def __init__(self, config_path="config.json"):
        self._config_path = config_path
        if os.path.isabs(config_path):
            self._resolved_path = config_path
        else:
            self._resolved_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), config_path)
        self._last_load_error = None
        self.config = self._load_config()

    @property
    def last_load_error(self):
        return self._last_load_error

    @property
    def resolved_path(self):
        return self._resolved_path

    def _load_config(self):
        """Load configuration from the file or initialize an empty config."""
        path = self._resolved_path
        if os.path.exists(path):
            try:
                with open(path, "r") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                self._last_load_error = e
                logger.error(f"Invalid JSON in {path}. Loading empty configuration.")
        return {}

    def get(self, *keys, default=None):
        """
        Access nested values.
        Supports both:
          get("a", "b", "c")  and  get("a.b.c")
        """
        # Allow a single dotted string
        if len(keys) == 1 and isinstance(keys[0], str) and "." in keys[0]:
            keys = keys[0].split(".")

        node = self.config
        for k in keys:
            if isinstance(node, dict) and k in node:
                node = node[k]
            else:
                return default
        return node
