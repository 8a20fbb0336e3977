from wifigate.routes.journey import journey_bp
from wifigate.routes.admin import admin_bp

__all__ = ['journey_bp', 'admin_bp']
