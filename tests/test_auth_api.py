"""
Tests for authentication, profile, history, document and model endpoints.
"""

from meddy.api.messages import generate_uuid
from meddy.database.core.funcs import save_chat, save_document, save_suggestions, update_user_info
from tests.conftest import sign_up


class TestAuth:
    """Login and registration action states."""

    def test_register_sets_session_cookie(self, client):
        response = client.post("/api/auth/register", json={"email": "sam@example.com", "password": "secret123"})
        assert response.json() == {"status": "success", "userInfo": {"name": None, "age": None}}
        assert "token" in response.cookies

    def test_register_existing_user(self, client):
        sign_up(client, "sam@example.com")
        response = client.post("/api/auth/register", json={"email": "sam@example.com", "password": "secret123"})
        assert response.json()["status"] == "user_exists"

    def test_invalid_data(self, client):
        assert client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret123"}).json() == {
            "status": "invalid_data"
        }
        assert client.post("/api/auth/login", json={"email": "sam@example.com", "password": "123"}).json() == {
            "status": "invalid_data"
        }

    def test_login_returns_profile(self, client):
        user_id = sign_up(client, "sam@example.com")
        update_user_info(user_id, name="Sam", age="34")
        client.cookies.clear()

        response = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "secret123"})
        assert response.json() == {"status": "success", "userInfo": {"name": "Sam", "age": "34"}}
        assert client.get("/api/history").status_code == 200

    def test_login_wrong_password(self, client):
        sign_up(client, "sam@example.com")
        client.cookies.clear()
        response = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "wrong-one"})
        assert response.json() == {"status": "failed"}
        assert "token" not in response.cookies

    def test_logout_clears_session(self, client):
        sign_up(client, "sam@example.com")
        client.post("/api/auth/logout")
        assert client.get("/api/history").status_code == 401


class TestUserProfile:

    def test_own_profile(self, client, user_id):
        response = client.get(f"/api/user/{user_id}")
        assert response.status_code == 200
        assert response.json()["email"] == "sam@example.com"
        assert "password" not in response.json()

    def test_requires_session(self, client, user_id):
        client.cookies.clear()
        response = client.get(f"/api/user/{user_id}")
        assert response.status_code == 401
        assert response.text == "Unauthorized"

    def test_other_users_profile(self, client, user_id):
        sign_up(client, "ben@example.com")
        assert client.get(f"/api/user/{user_id}").status_code == 401

    def test_bearer_header(self, client, user_id):
        token = client.cookies.get("token")
        client.cookies.clear()
        response = client.get(f"/api/user/{user_id}", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200


def test_history_lists_own_chats(client, user_id):
    save_chat(id=generate_uuid(), user_id=user_id, title="Headache")
    [chat] = client.get("/api/history").json()
    assert chat["title"] == "Headache"
    assert chat["userId"] == user_id


class TestDocumentApi:

    def test_save_list_and_delete_after(self, client, user_id):
        document_id = generate_uuid()
        for content in ("v1", "v2"):
            response = client.post(f"/api/document?id={document_id}", json={"title": "Patient File", "content": content})
            assert response.status_code == 200

        revisions = client.get(f"/api/document?id={document_id}").json()
        assert [r["content"] for r in revisions] == ["v1", "v2"]

        response = client.patch(f"/api/document?id={document_id}", json={"timestamp": revisions[0]["createdAt"]})
        assert response.text == "Deleted"
        assert [r["content"] for r in client.get(f"/api/document?id={document_id}").json()] == ["v1"]

    def test_errors(self, client, user_id):
        assert client.get("/api/document").status_code == 400
        assert client.get(f"/api/document?id={generate_uuid()}").status_code == 404

        document_id = generate_uuid()
        save_document(id=document_id, title="Patient File", kind="text", content="v1", user_id=user_id)
        sign_up(client, "ben@example.com")
        assert client.get(f"/api/document?id={document_id}").status_code == 401

    def test_malformed_id_is_rejected(self, client, user_id):
        response = client.post("/api/document?id=my-doc", json={"title": "Patient File", "content": "v1"})
        assert response.status_code == 400
        assert response.text == "Invalid id"
        assert client.get("/api/document?id=my-doc").status_code == 404


class TestSuggestionsApi:

    def test_lists_own_suggestions(self, client, user_id):
        document_id = generate_uuid()
        document = save_document(id=document_id, title="Patient File", kind="text", content="v1", user_id=user_id)
        save_suggestions([{
            "id": generate_uuid(),
            "document_id": document_id,
            "document_created_at": document["createdAt"],
            "original_text": "a",
            "suggested_text": "b",
            "description": "c",
            "is_resolved": False,
            "user_id": user_id,
        }])
        [suggestion] = client.get(f"/api/suggestions?documentId={document_id}").json()
        assert suggestion["suggestedText"] == "b"

    def test_missing_document_id(self, client, user_id):
        assert client.get("/api/suggestions").status_code == 404

    def test_requires_session(self, client):
        assert client.get(f"/api/suggestions?documentId={generate_uuid()}").status_code == 401


def test_model_selection_cookie(client):
    response = client.post("/api/model", json={"modelId": "gpt-4o"})
    assert response.cookies["model-id"] == "gpt-4o"
    assert client.post("/api/model", json={"modelId": "gpt-2"}).status_code == 404
