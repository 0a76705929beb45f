"""
Integration tests for the health endpoint and bearer authentication.
"""

from backend.src.models import Judge


class TestHealthAPI:
    """Integration tests for GET /health"""

    def test_health(self, test_client):
        """Test the health endpoint reports the service"""
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "eodsa-results-engine"


class TestBearerAuth:
    """Integration tests for token handling on protected routes"""

    def test_missing_token(self, test_client):
        """Test protected routes require a token"""
        response = test_client.post("/api/performances/sync-item-numbers")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, test_client):
        """Test malformed tokens are rejected"""
        response = test_client.post(
            "/api/performances/sync-item-numbers",
            headers={"Authorization": "Bearer garbage"},
        )
        assert response.status_code == 401

    def test_non_admin_forbidden(self, test_client, auth_headers, sample_judge):
        """Test admin routes refuse regular judges"""
        response = test_client.post(
            "/api/performances/sync-item-numbers",
            headers=auth_headers(sample_judge()),
        )
        assert response.status_code == 403

    def test_deleted_judge_token_rejected(
        self, test_client, auth_headers, sample_judge, test_db_session
    ):
        """Test tokens of judges that no longer exist are rejected"""
        judge = sample_judge()
        headers = auth_headers(judge)
        test_db_session.query(Judge).filter(Judge.id == judge.id).delete()
        test_db_session.commit()

        response = test_client.post("/api/performances/sync-item-numbers", headers=headers)
        assert response.status_code == 401

    def test_admin_allowed(self, test_client, admin_headers):
        """Test admin routes accept administrators"""
        response = test_client.post("/api/performances/sync-item-numbers", headers=admin_headers)
        assert response.status_code == 200
