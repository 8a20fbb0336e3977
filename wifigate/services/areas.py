"""
Location directory: the known areas (hotspots) of a tenant.

Three interchangeable strategies back the same list_areas() contract, picked
with WIFIGATE_AREA_SOURCE:

- history: areas seen in view events and configuration rows
- configs: areas that have a configuration row
- directory: an external organization/location directory API
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

import requests

from wifigate.models import db, VideoConfig, VideoView
from wifigate.services.normalize import optional_text, require_text

logger = logging.getLogger(__name__)

AREA_SOURCES = ("history", "configs", "directory")
DEFAULT_PAGE_SIZE = 100
MAX_PAGES = 500


class DirectoryError(Exception):
    """Raised when the external location directory cannot be queried."""


@dataclass
class Area:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


def areas_from_sightings(sightings) -> list[Area]:
    """Build one Area per id from (area_id, name, seen_at) tuples.

    Each area is named after its most recent sighting that carries a name,
    or its id when none does. Results are sorted by name.
    """
    names = {}
    ordered = sorted(sightings, key=lambda s: s[2] or datetime.min, reverse=True)
    for area_id, name, _ in ordered:
        if not area_id:
            continue
        if names.get(area_id) is None:
            names[area_id] = name or None

    areas = [Area(id=area_id, name=name or area_id) for area_id, name in names.items()]
    return sorted(areas, key=lambda area: (area.name.lower(), area.id))


class AreaDirectory:
    """Base class for area listing strategies."""

    name = None

    def list_areas(self, tenant_id: str) -> list[Area]:
        raise NotImplementedError


class ConfigAreaDirectory(AreaDirectory):
    name = "configs"

    def _config_sightings(self, tenant_id: str) -> list[tuple]:
        return db.session.query(
            VideoConfig.area_id, VideoConfig.label, VideoConfig.updated_at
        ).filter(
            VideoConfig.tenant_id == tenant_id,
            VideoConfig.area_id.isnot(None),
        ).all()

    def list_areas(self, tenant_id: str) -> list[Area]:
        return areas_from_sightings(self._config_sightings(tenant_id))


class HistoryAreaDirectory(ConfigAreaDirectory):
    name = "history"

    def list_areas(self, tenant_id: str) -> list[Area]:
        view_sightings = db.session.query(
            VideoView.area_id, VideoView.area_name, VideoView.created_at
        ).filter(
            VideoView.tenant_id == tenant_id,
            VideoView.area_id.isnot(None),
        ).all()
        return areas_from_sightings(list(view_sightings) + list(self._config_sightings(tenant_id)))


@dataclass
class DirectoryConfig:
    """Configuration for the external location directory API."""

    base_url: str
    client_key: str
    client_secret: str
    page_size: int
    timeout: float

    @classmethod
    def from_env(cls, env) -> "DirectoryConfig | None":
        """Create DirectoryConfig from environment variables.

        Returns None if the directory URL or credentials are missing.
        """
        base_url = env.get("WIFIGATE_DIRECTORY_URL", "")
        client_key = env.get("WIFIGATE_DIRECTORY_CLIENT_KEY", "")
        client_secret = env.get("WIFIGATE_DIRECTORY_CLIENT_SECRET", "")

        if not base_url or not client_key or not client_secret:
            logger.warning("Location directory selected but URL or credentials not configured")
            return None

        try:
            page_size = int(env.get("WIFIGATE_DIRECTORY_PAGE_SIZE") or DEFAULT_PAGE_SIZE)
            timeout = float(env.get("WIFIGATE_HTTP_TIMEOUT") or 10)
        except ValueError:
            logger.warning("Invalid directory page size or timeout, using defaults")
            page_size, timeout = DEFAULT_PAGE_SIZE, 10.0

        return cls(
            base_url=base_url.rstrip("/"),
            client_key=client_key,
            client_secret=client_secret,
            page_size=max(page_size, 1),
            timeout=timeout,
        )


class RemoteAreaDirectory(AreaDirectory):
    """Lists areas from a paginated organization/location directory API."""

    name = "directory"

    def __init__(self, config: DirectoryConfig):
        self.config = config

    def _login(self) -> str:
        """Exchange the client key/secret pair for a bearer token."""
        try:
            response = requests.post(
                f"{self.config.base_url}/auth/login",
                json={"clientKey": self.config.client_key, "clientSecret": self.config.client_secret},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Directory login failed: {e}")
            raise DirectoryError(f"Directory login failed: {e}") from e

        token = None
        if isinstance(data, dict):
            token = data.get("token") or data.get("access_token")
        if not token:
            raise DirectoryError("Directory login response missing token")
        return token

    def _fetch_page(self, tenant_id: str, page: int, token: str) -> dict:
        try:
            response = requests.get(
                f"{self.config.base_url}/organizations/{quote(tenant_id, safe='')}/locations",
                params={"page": page, "limit": self.config.page_size},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Directory listing failed for tenant '{tenant_id}' (page {page}): {e}")
            raise DirectoryError(f"Directory listing failed: {e}") from e

        if not isinstance(payload, dict):
            raise DirectoryError("Directory listing returned an unexpected payload")
        return payload

    def list_areas(self, tenant_id: str) -> list[Area]:
        token = self._login()
        areas = {}
        for page in range(1, MAX_PAGES + 1):
            payload = self._fetch_page(tenant_id, page, token)
            items = payload.get("data") or []
            for item in items:
                if not isinstance(item, dict):
                    continue
                area_id = optional_text(item.get("id"))
                if area_id and area_id not in areas:
                    areas[area_id] = Area(id=area_id, name=optional_text(item.get("name")) or area_id)

            has_more = payload.get("hasMore", len(items) >= self.config.page_size)
            if not items or not has_more:
                break
        else:
            logger.warning(f"Directory listing for tenant '{tenant_id}' stopped after {MAX_PAGES} pages")

        return list(areas.values())


class AreaDirectoryService:
    """Holds the area listing strategy selected for the application."""

    def __init__(self, strategy: AreaDirectory | None = None):
        self.strategy = strategy or HistoryAreaDirectory()

    def init_app(self, app):
        source = (app.config.get("WIFIGATE_AREA_SOURCE") or "history").lower()
        if source not in AREA_SOURCES:
            logger.warning(f"Unknown area source '{source}', using history")
            source = "history"

        if source == "directory":
            config = DirectoryConfig.from_env(app.config)
            if config is None:
                logger.warning("Falling back to history-based area listing")
                self.strategy = HistoryAreaDirectory()
            else:
                self.strategy = RemoteAreaDirectory(config)
        elif source == "configs":
            self.strategy = ConfigAreaDirectory()
        else:
            self.strategy = HistoryAreaDirectory()

        logger.info(f"Area listing uses the '{self.strategy.name}' source")

    def list_areas(self, tenant_id) -> list[Area]:
        return self.strategy.list_areas(require_text(tenant_id, "tenant_id"))


area_service = AreaDirectoryService()
