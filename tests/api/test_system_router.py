"""
API Integration Tests for System Router Endpoints
"""

from watimage import __version__


class TestSystemRouterAPI:
    """Integration tests for system router endpoints"""

    def test_health_check(self, client):
        """Test basic health check endpoint"""
        response = client.get("/api/system/health")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert isinstance(data["uptime"], (int, float))
        assert data["uptime"] >= 0

    def test_health_lists_formats(self, client):
        """Test supported output formats are advertised"""
        data = client.get("/api/system/health").json()
        assert set(data["formats"]) == {"image/png", "image/jpeg", "image/gif"}
