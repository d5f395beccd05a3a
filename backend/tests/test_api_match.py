"""Tests for the compatibility API endpoints."""

import pytest
from prometheus_client import REGISTRY


@pytest.mark.asyncio
class TestMatchEndpoint:
    """Test suite for POST /api/v1/match."""

    async def test_match_partial(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": ["Go"], "required_skills": ["Go", "Rust", "C++"]},
        )
        assert response.status_code == 200
        assert response.json() == {
            "score": 33,
            "matchedSkills": ["Go"],
            "missingSkills": ["Rust", "C++"],
        }

    async def test_match_case_insensitive(self, client):
        response = await client.post(
            "/api/v1/match",
            json={
                "candidate_skills": ["go", "RUST", "Python"],
                "required_skills": ["Go", "Rust"],
            },
        )
        assert response.status_code == 200
        assert response.json() == {
            "score": 100,
            "matchedSkills": ["Go", "Rust"],
            "missingSkills": [],
        }

    async def test_empty_requirements(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": ["Go"], "required_skills": []},
        )
        assert response.status_code == 200
        assert response.json() == {"score": 100, "matchedSkills": [], "missingSkills": []}

    async def test_non_string_skill_rejected(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": [1, 2], "required_skills": ["Go"]},
        )
        assert response.status_code == 422

    async def test_missing_list_rejected(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": ["Go"]},
        )
        assert response.status_code == 422

    async def test_null_list_rejected(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": None, "required_skills": ["Go"]},
        )
        assert response.status_code == 422

    async def test_too_many_skills(self, client, override_settings):
        override_settings(max_skills_per_list=3)
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": ["a", "b", "c", "d"], "required_skills": ["a"]},
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == {
            "field": "candidate_skills",
            "max_items": 3,
            "received": 4,
        }

    async def test_response_headers(self, client):
        response = await client.post(
            "/api/v1/match",
            json={"candidate_skills": [], "required_skills": []},
        )
        assert "X-Request-ID" in response.headers
        assert "X-Response-Time" in response.headers


@pytest.mark.asyncio
class TestProjectMatchEndpoint:
    """Test suite for POST /api/v1/match/projects."""

    async def test_stack_from_analyses(self, client):
        response = await client.post(
            "/api/v1/match/projects",
            json={
                "analyses": [
                    {"techStack": ["Next.js", "TypeScript"], "summary": "ignored"},
                    {"techStack": ["PostgreSQL"]},
                ],
                "required_skills": ["typescript", "PostgreSQL", "Docker", "Next.js", "Go"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 60
        assert data["band"] == "moderate"
        assert data["matchedSkills"] == ["typescript", "PostgreSQL", "Next.js"]
        assert data["missingSkills"] == ["Docker", "Go"]
        assert data["candidateSkills"] == ["Next.js", "TypeScript", "PostgreSQL"]

    async def test_languages_extend_stack(self, client):
        response = await client.post(
            "/api/v1/match/projects",
            json={
                "analyses": [{"techStack": ["Python"]}],
                "languages": [
                    {"name": "Shell", "count": 1, "percentage": 2.0},
                    {"name": "Go", "count": 3, "percentage": 30.0},
                    {"name": "Python", "count": 6, "percentage": 68.0},
                ],
                "min_language_percentage": 5,
                "required_skills": ["Python", "Go", "Shell"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["candidateSkills"] == ["Python", "Go"]
        assert data["missingSkills"] == ["Shell"]
        assert data["score"] == 67

    async def test_no_analyses_scores_zero(self, client):
        response = await client.post(
            "/api/v1/match/projects",
            json={"analyses": [], "required_skills": ["Go"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 0
        assert data["band"] == "developing"
        assert data["candidateSkills"] == []

    async def test_null_tech_stack_contributes_nothing(self, client):
        """Analyses with a null or absent techStack are skipped, not rejected."""
        response = await client.post(
            "/api/v1/match/projects",
            json={
                "analyses": [{"techStack": None}, {"summary": "no stack"}, {"techStack": ["Go"]}],
                "required_skills": ["Go"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["candidateSkills"] == ["Go"]

    async def test_malformed_tech_stack_rejected(self, client):
        response = await client.post(
            "/api/v1/match/projects",
            json={"analyses": [{"techStack": [42]}], "required_skills": ["Go"]},
        )
        assert response.status_code == 422


@pytest.mark.asyncio
class TestBatchMatchEndpoint:
    """Test suite for POST /api/v1/match/batch."""

    async def test_sorted_best_first_with_stable_ties(self, client):
        response = await client.post(
            "/api/v1/match/batch",
            json={
                "candidate_skills": ["Python", "Docker"],
                "targets": [
                    {"id": "acme", "required_skills": ["Go", "Rust"]},
                    {"id": "globex", "required_skills": ["python", "docker"]},
                    {"id": "initech", "required_skills": ["Python", "Java"]},
                    {"id": "hooli", "required_skills": ["Docker", "Kotlin"]},
                ],
            },
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["id"] for r in results] == ["globex", "initech", "hooli", "acme"]
        assert [r["score"] for r in results] == [100, 50, 50, 0]
        assert results[0]["band"] == "strong"
        assert results[0]["matchedSkills"] == ["python", "docker"]
        assert results[-1]["missingSkills"] == ["Go", "Rust"]

    async def test_empty_targets(self, client):
        response = await client.post(
            "/api/v1/match/batch",
            json={"candidate_skills": ["Go"], "targets": []},
        )
        assert response.status_code == 200
        assert response.json() == {"results": []}

    async def test_too_many_targets(self, client, override_settings):
        override_settings(max_batch_targets=1)
        response = await client.post(
            "/api/v1/match/batch",
            json={
                "candidate_skills": ["Go"],
                "targets": [
                    {"id": "a", "required_skills": ["Go"]},
                    {"id": "b", "required_skills": ["Go"]},
                ],
            },
        )
        assert response.status_code == 422
        assert response.json()["error"]["details"]["field"] == "targets"

    async def test_blank_target_id_rejected(self, client):
        response = await client.post(
            "/api/v1/match/batch",
            json={"candidate_skills": [], "targets": [{"id": "", "required_skills": []}]},
        )
        assert response.status_code == 422


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Test suite for system endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_readiness_with_redis(self, client):
        response = await client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["redis"]["status"] == "ok"


@pytest.mark.asyncio
class TestRequestMetrics:
    """HTTP metrics are labelled by route template, not raw path."""

    @staticmethod
    def _count(endpoint: str, status_code: str, method: str = "POST") -> float:
        value = REGISTRY.get_sample_value(
            "dsc_http_requests_total",
            {"method": method, "endpoint": endpoint, "status_code": status_code},
        )
        return value or 0.0

    async def test_matched_route_label(self, client):
        before = self._count("/api/v1/match/batch", "200")
        await client.post(
            "/api/v1/match/batch",
            json={"candidate_skills": [], "targets": []},
        )
        assert self._count("/api/v1/match/batch", "200") == before + 1

    async def test_unknown_paths_share_one_label(self, client):
        before = self._count("unmatched", "404", method="GET")
        await client.get("/api/v1/companies/123")
        await client.get("/api/v1/companies/456")
        assert self._count("unmatched", "404", method="GET") == before + 2
        assert self._count("/api/v1/companies/123", "404", method="GET") == 0.0
