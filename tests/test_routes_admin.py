"""
Tests for admin routes.
"""
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from wifigate.models import db, VideoConfig
from wifigate.services.areas import DirectoryError


def store_down(statement="SELECT"):
    return OperationalError(statement, {}, Exception("store unavailable"))


class TestListConfigsRoute:
    """Tests for GET /api/configs."""

    def test_list_configs(self, client, tenant_configs):
        response = client.get('/api/configs?tenant_id=t1')

        assert response.status_code == 200
        data = response.get_json()
        assert isinstance(data, list)
        assert {row["id"] for row in data} == {tenant_configs["default_id"], tenant_configs["lobby_id"]}
        assert {row["area_id"] for row in data} == {None, "lobby"}

    def test_list_configs_unknown_tenant(self, client):
        response = client.get('/api/configs?tenant_id=nobody')
        assert response.status_code == 200
        assert response.get_json() == []

    def test_list_configs_missing_tenant(self, client):
        response = client.get('/api/configs')
        assert response.status_code == 400
        assert "tenant_id" in response.get_json()["error"]

    def test_list_configs_store_error(self, client):
        with patch("wifigate.routes.admin.list_configs") as mock_list:
            mock_list.side_effect = store_down()
            response = client.get('/api/configs?tenant_id=t1')

        assert response.status_code == 500
        assert "store unavailable" in response.get_json()["error"]


class TestSaveConfigRoute:
    """Tests for POST /api/config."""

    def test_create_config(self, client, app):
        response = client.post('/api/config', json={
            "tenant_id": "t1",
            "area_id": "lobby",
            "label": "Lobby",
            "video_url": "https://youtu.be/a",
            "video_label": "Promo",
            "min_duration": "20",
        })

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["tenant_id"] == "t1"
        assert body["data"]["area_id"] == "lobby"
        assert body["data"]["min_duration"] == 20
        assert body["data"]["video_label"] == "Promo"

    def test_save_same_scope_twice_updates(self, client, app):
        first = client.post('/api/config', json={"tenant_id": "t1", "video_url": "https://youtu.be/a"}).get_json()
        second = client.post('/api/config', json={
            "tenant_id": "t1", "area_id": "", "video_url": "https://youtu.be/b",
        }).get_json()

        assert first["data"]["id"] == second["data"]["id"]
        assert second["data"]["video_url"] == "https://youtu.be/b"
        assert second["data"]["created_at"] == first["data"]["created_at"]
        with app.app_context():
            assert VideoConfig.query.count() == 1

    def test_invalid_min_duration_defaults(self, client):
        body = client.post('/api/config', json={
            "tenant_id": "t1", "video_url": "https://youtu.be/a", "min_duration": "soon",
        }).get_json()
        assert body["data"]["min_duration"] == 10

    def test_oversized_min_duration_defaults(self, client):
        response = client.post('/api/config', json={
            "tenant_id": "t1", "video_url": "https://youtu.be/a", "min_duration": 10**20,
        })

        assert response.status_code == 200
        assert response.get_json()["data"]["min_duration"] == 10

    def test_disable_config(self, client):
        body = client.post('/api/config', json={
            "tenant_id": "t1", "video_url": "https://youtu.be/a", "active": False,
        }).get_json()
        assert body["data"]["active"] is False

    def test_missing_video_url(self, client, app):
        response = client.post('/api/config', json={"tenant_id": "t1"})

        assert response.status_code == 400
        assert "video_url" in response.get_json()["error"]
        with app.app_context():
            assert VideoConfig.query.count() == 0

    def test_missing_tenant(self, client):
        response = client.post('/api/config', json={"video_url": "https://youtu.be/a"})
        assert response.status_code == 400
        assert "tenant_id" in response.get_json()["error"]

    def test_store_error(self, client):
        with patch("wifigate.routes.admin.upsert_config") as mock_upsert:
            mock_upsert.side_effect = store_down("INSERT")
            response = client.post('/api/config', json={"tenant_id": "t1", "video_url": "u"})

        assert response.status_code == 500
        assert "store unavailable" in response.get_json()["error"]


class TestDeleteConfigRoute:
    """Tests for DELETE /api/config/<id>."""

    def test_delete_config(self, client, app, tenant_configs):
        response = client.delete(f'/api/config/{tenant_configs["lobby_id"]}')

        assert response.status_code == 200
        assert response.get_json() == {"success": True}
        with app.app_context():
            assert db.session.get(VideoConfig, tenant_configs["lobby_id"]) is None
            assert db.session.get(VideoConfig, tenant_configs["default_id"]) is not None

    def test_delete_unknown_config(self, client):
        response = client.delete('/api/config/12345')
        assert response.status_code == 200
        assert response.get_json() == {"success": True}

    def test_delete_store_error(self, client):
        with patch("wifigate.routes.admin.delete_config") as mock_delete:
            mock_delete.side_effect = store_down("DELETE")
            response = client.delete('/api/config/1')

        assert response.status_code == 500


class TestStatsRoute:
    """Tests for GET /api/stats."""

    def test_stats(self, client, sample_views):
        response = client.get('/api/stats?tenant_id=t1')

        assert response.status_code == 200
        data = response.get_json()
        assert data["total_views"] == 4
        assert data["completed_views"] == 2
        assert data["unique_customers"] == 2
        assert data["by_video"][0] == {
            "video_url": "https://youtu.be/a",
            "video_label": "Video A",
            "total": 3,
            "completed": 2,
            "unique_customers": 2,
        }
        assert data["by_video"][1]["unique_customers"] == 0
        locations = {loc["area_id"]: loc for loc in data["by_location"]}
        assert locations["lobby"] == {"area_id": "lobby", "name": "Lobby", "total": 2, "completed": 2}
        assert locations["N/A"]["name"] == "N/A"

    def test_stats_date_filter(self, client, sample_views):
        included = client.get('/api/stats?tenant_id=t1&to=2024-01-15').get_json()
        excluded = client.get('/api/stats?tenant_id=t1&to=2024-01-14').get_json()

        assert included["total_views"] == 3
        assert excluded["total_views"] == 2

    def test_stats_invalid_date(self, client):
        response = client.get('/api/stats?tenant_id=t1&from=last-week')
        assert response.status_code == 400
        assert "last-week" in response.get_json()["error"]

    def test_stats_missing_tenant(self, client):
        response = client.get('/api/stats')
        assert response.status_code == 400

    def test_stats_store_error(self, client):
        with patch("wifigate.routes.admin.compute_stats") as mock_stats:
            mock_stats.side_effect = store_down()
            response = client.get('/api/stats?tenant_id=t1')

        assert response.status_code == 500


class TestAreasRoute:
    """Tests for GET /api/areas."""

    def test_areas_empty_tenant(self, client):
        response = client.get('/api/areas?tenant_id=t1')
        assert response.status_code == 200
        assert response.get_json() == []

    def test_areas_from_history(self, client, sample_views):
        response = client.get('/api/areas?tenant_id=t1')

        assert response.status_code == 200
        assert response.get_json() == [
            {"id": "lobby", "name": "Lobby"},
            {"id": "terrace", "name": "Terrace"},
        ]

    def test_areas_missing_tenant(self, client):
        assert client.get('/api/areas').status_code == 400

    def test_areas_directory_failure(self, client):
        with patch("wifigate.routes.admin.area_service") as mock_service:
            mock_service.list_areas.side_effect = DirectoryError("Directory login failed")
            response = client.get('/api/areas?tenant_id=t1')

        assert response.status_code == 500
        assert response.get_json() == {"error": "Directory login failed"}


class TestHealthRoute:
    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"
