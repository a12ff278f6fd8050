from .api import api_bp
from .dashboard import dashboard_bp

__all__ = ["api_bp", "dashboard_bp"]
