"""
Visitor context lookup against the captive-portal identity provider.

Given the opaque session key handed to the splash page, the provider returns
the tenant, WiFi area and customer behind the session. Any failure here means
"no context": callers must let the visitor through rather than error out.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import requests

from wifigate.services.normalize import optional_text

logger = logging.getLogger(__name__)

DEFAULT_SESSION_URL = "https://volare.cloud4wi.com/controlpanel/1.0/bridge/sessions/{session_key}"
DEFAULT_TIMEOUT = 10.0


@dataclass
class SessionProviderConfig:
    """Configuration for the identity provider session endpoint."""

    session_url: str
    timeout: float

    @classmethod
    def from_env(cls, env) -> "SessionProviderConfig":
        try:
            timeout = float(env.get("WIFIGATE_HTTP_TIMEOUT") or DEFAULT_TIMEOUT)
        except ValueError:
            logger.warning("Invalid WIFIGATE_HTTP_TIMEOUT, using default")
            timeout = DEFAULT_TIMEOUT
        return cls(
            session_url=env.get("WIFIGATE_SESSION_URL") or DEFAULT_SESSION_URL,
            timeout=timeout,
        )


@dataclass
class VisitorContext:
    tenant_id: str
    area_id: str | None = None
    area_name: str | None = None
    customer_id: str | None = None
    customer_email: str | None = None
    session_key: str | None = None

    def to_dict(self) -> dict:
        return {
            "tenantId": self.tenant_id,
            "areaId": self.area_id,
            "areaName": self.area_name,
            "customerId": self.customer_id,
            "customerEmail": self.customer_email,
            "sessionKey": self.session_key,
        }


def _first_value(data: dict, *paths: tuple[str, ...]) -> str | None:
    for path in paths:
        value = data
        for key in path:
            if not isinstance(value, dict):
                value = None
                break
            value = value.get(key)
        value = optional_text(value) if not isinstance(value, dict) else None
        if value is not None:
            return value
    return None


def parse_context(data, session_key: str | None = None) -> VisitorContext | None:
    """Map a provider session payload onto a VisitorContext.

    Accepts both the Cloud4Wi bridge shape (tenant.tenant_id,
    wifiarea.wifiarea_id, hotspot.name) and the generic one (tenant.id,
    area.id, areaName). Returns None when no tenant can be found.
    """
    if not isinstance(data, dict):
        return None

    tenant_id = _first_value(data, ("tenant", "tenant_id"), ("tenant", "id"))
    if tenant_id is None:
        return None

    return VisitorContext(
        tenant_id=tenant_id,
        area_id=_first_value(data, ("wifiarea", "wifiarea_id"), ("area", "id")),
        area_name=_first_value(data, ("hotspot", "name"), ("wifiarea", "name"), ("area", "name"), ("areaName",)),
        customer_id=_first_value(data, ("customer", "id")),
        customer_email=_first_value(data, ("customer", "email")),
        session_key=session_key,
    )


class SessionContextService:
    """Client for the identity provider session endpoint."""

    def __init__(self, config: SessionProviderConfig | None = None):
        self.config = config or SessionProviderConfig(DEFAULT_SESSION_URL, DEFAULT_TIMEOUT)

    def init_app(self, app):
        self.config = SessionProviderConfig.from_env(app.config)

    def resolve(self, session_key) -> VisitorContext | None:
        """Fetch the visitor context for a session key, or None on any failure."""
        session_key = optional_text(session_key)
        if session_key is None:
            return None

        url = self.config.session_url.format(session_key=quote(session_key, safe=""))
        try:
            response = requests.get(url, timeout=self.config.timeout)
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Session lookup failed: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Session lookup returned HTTP {response.status_code}")
            return None

        if not isinstance(payload, dict) or payload.get("status") != "success":
            logger.info("Session lookup did not succeed, no visitor context")
            return None

        context = parse_context(payload.get("data"), session_key)
        if context is None:
            logger.info("Session payload carries no tenant, no visitor context")
        return context


context_service = SessionContextService()
