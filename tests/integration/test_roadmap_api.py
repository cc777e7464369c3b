"""
Integration Tests - HTTP API

Full FastAPI stack through TestClient with a temporary SQLite file and a
scripted language model wired in via dependency overrides.
"""
import pytest
from fastapi.testclient import TestClient

from api.dependencies.dependency_injection import (
    get_db_connection,
    get_password_hasher,
    get_roadmap_generator,
    get_token_signer,
)
from api.main import app
from application.services.roadmap_generator import RoadmapGenerator
from tests.fakes import ScriptedLLM, model_roadmap_text, resources_text

CREATE_BODY = {
    "skill": "Go",
    "currentLevel": "beginner",
    "targetOutcome": "build a REST API in Go",
    "hoursPerWeek": 5,
}


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def client(db, llm, password_hasher, token_signer):
    app.dependency_overrides[get_db_connection] = lambda: db
    app.dependency_overrides[get_roadmap_generator] = lambda: RoadmapGenerator(llm, timeout_seconds=5)
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_token_signer] = lambda: token_signer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, email="ada@example.com") -> dict:
    response = client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": email, "password": "analytical"},
    )
    assert response.status_code == 201, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def create_roadmap(client, headers, llm, reply=None) -> dict:
    llm.replies.append(reply if reply is not None else ConnectionError("model unreachable"))
    response = client.post("/api/roadmaps", json=CREATE_BODY, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["roadmap"]


class TestAuthEndpoints:
    def test_signup_signin_me(self, client):
        signup(client)
        response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "analytical"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        headers = {"Authorization": f"Bearer {body['data']['token']}"}

        me = client.get("/api/auth/me", headers=headers).json()
        assert me["data"]["user"]["email"] == "ada@example.com"
        assert "password" not in str(me["data"]["user"]).lower()

    def test_duplicate_signup(self, client):
        signup(client)
        response = client.post(
            "/api/auth/signup",
            json={"name": "Ada", "email": "ada@example.com", "password": "analytical"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_bad_signin(self, client):
        signup(client)
        response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "nope!!"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer junk"}, {"Authorization": "Basic abc"}])
    def test_roadmaps_require_auth(self, client, headers):
        response = client.get("/api/roadmaps", headers=headers)
        assert response.status_code == 401
        assert response.json()["success"] is False


class TestRoadmapEndpoints:
    def test_create_with_unreachable_model_returns_fallback(self, client, llm):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm)

        assert "Go" in roadmap["title"]
        assert roadmap["totalSteps"] == 8
        assert roadmap["difficulty"] == "Beginner"
        assert roadmap["estimatedHours"] == 60
        assert roadmap["progress"] == 0
        assert roadmap["isActive"] is True

    def test_create_from_model_output(self, client, llm):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm, reply=model_roadmap_text(10))
        assert roadmap["totalSteps"] == 10
        assert roadmap["title"] == "Mastering Rust"

    def test_create_validation_lists_fields(self, client, llm):
        headers = signup(client)
        body = dict(CREATE_BODY, hoursPerWeek=0, targetOutcome="short")
        response = client.post("/api/roadmaps", json=body, headers=headers)

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"hoursPerWeek", "targetOutcome"}
        assert llm.calls == []

    def test_list_get_and_stats(self, client, llm):
        headers = signup(client)
        first = create_roadmap(client, headers, llm)
        second = create_roadmap(client, headers, llm)

        listed = client.get("/api/roadmaps", headers=headers).json()["data"]["roadmaps"]
        assert [r["id"] for r in listed] == [second["id"], first["id"]]

        fetched = client.get(f"/api/roadmaps/{first['id']}", headers=headers).json()["data"]["roadmap"]
        assert fetched["id"] == first["id"]

        stats = client.get("/api/roadmaps/stats", headers=headers).json()["data"]["stats"]
        assert stats["totalRoadmaps"] == 2
        assert stats["totalSteps"] == 16
        assert stats["totalHours"] == 120

    def test_step_completion(self, client, llm):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm)
        url = f"/api/roadmaps/{roadmap['id']}/steps/step_1"

        response = client.put(url, json={"completed": True}, headers=headers)
        assert response.status_code == 200
        updated = response.json()["data"]["roadmap"]
        assert updated["completedSteps"] == 1
        # 1/8 = 12.5% rounds half up
        assert updated["progress"] == 13

        assert client.put(url, json={"completed": "yes"}, headers=headers).status_code == 400
        missing = client.put(
            f"/api/roadmaps/{roadmap['id']}/steps/step_99", json={"completed": True}, headers=headers
        )
        assert missing.status_code == 404
        assert missing.json()["message"] == "Step not found"

    def test_augment_resources(self, client, llm):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm)
        llm.replies.append(resources_text(3))

        response = client.post(f"/api/roadmaps/{roadmap['id']}/steps/step_1/resources", headers=headers)
        assert response.status_code == 200
        assert len(response.json()["data"]["resources"]) == 3

        stored = client.get(f"/api/roadmaps/{roadmap['id']}", headers=headers).json()["data"]["roadmap"]
        assert len(stored["steps"][0]["resources"]) == 5

    def test_graph(self, client, llm):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm)
        graph = client.get(f"/api/roadmaps/{roadmap['id']}/graph", headers=headers).json()["data"]["graph"]
        assert len(graph["nodes"]) == 8
        assert graph["sequence"][0] == "step_1"

    def test_other_users_roadmap_is_404(self, client, llm):
        alice = signup(client, "alice@example.com")
        bob = signup(client, "bob@example.com")
        roadmap = create_roadmap(client, alice, llm)

        response = client.get(f"/api/roadmaps/{roadmap['id']}", headers=bob)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Roadmap not found"}
        assert client.delete(f"/api/roadmaps/{roadmap['id']}", headers=bob).status_code == 404

    def test_soft_delete(self, client, llm, roadmap_store):
        headers = signup(client)
        roadmap = create_roadmap(client, headers, llm)

        response = client.delete(f"/api/roadmaps/{roadmap['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get(f"/api/roadmaps/{roadmap['id']}", headers=headers).status_code == 404
        assert client.get("/api/roadmaps", headers=headers).json()["data"]["roadmaps"] == []
        assert client.delete(f"/api/roadmaps/{roadmap['id']}", headers=headers).status_code == 404
        assert roadmap_store.get_by_id_raw(roadmap["id"]).is_active is False


class TestHealthEndpoints:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.headers["X-Request-ID"]
        assert "X-Process-Time" in response.headers

    def test_health_db(self, client):
        body = client.get("/api/health/db").json()
        assert body["status"] == "healthy"
        assert body["stats"]["schema_version"] == 1
