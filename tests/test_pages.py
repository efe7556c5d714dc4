"""
Tests for the rendered chat pages and the doctor seeding script.
"""

from meddy.api.messages import generate_uuid
from meddy.database.core.funcs import get_doctor_by_speciality, save_chat, save_messages, update_chat_visibility_by_id
from meddy.scripts.seed_doctors import load_doctors, main as seed_main
from tests.conftest import sign_up

COMPOSER = '<form id="composer">'


def make_chat(user_id: str) -> str:
    chat_id = generate_uuid()
    save_chat(id=chat_id, user_id=user_id, title="Headache")
    save_messages([
        {"id": generate_uuid(), "chat_id": chat_id, "role": "user", "content": "I have a headache"},
        {"id": generate_uuid(), "chat_id": chat_id, "role": "assistant", "content": "Since when?"},
    ])
    return chat_id


class TestPages:

    def test_new_chat_requires_session(self, client):
        assert client.get("/").status_code == 404

    def test_new_chat(self, client, user_id):
        response = client.get("/")
        assert response.status_code == 200
        assert COMPOSER in response.text
        assert 'value="ministral-3b-latest" selected' in response.text

    def test_model_cookie_selects_model(self, client, user_id):
        client.post("/api/model", json={"modelId": "gpt-4o"})
        assert 'value="gpt-4o" selected' in client.get("/").text

    def test_own_chat_renders_history(self, client, user_id):
        chat_id = make_chat(user_id)
        response = client.get(f"/chat/{chat_id}")
        assert response.status_code == 200
        assert "I have a headache" in response.text
        assert COMPOSER in response.text

    def test_unanswered_tool_calls_are_not_rendered(self, client, user_id):
        chat_id = make_chat(user_id)
        save_messages([{
            "id": generate_uuid(),
            "chat_id": chat_id,
            "role": "assistant",
            "content": [{"type": "tool-call", "toolCallId": "call_unanswered", "toolName": "getWeather", "args": {}}],
        }])
        response = client.get(f"/chat/{chat_id}")
        assert "Since when?" in response.text
        assert "call_unanswered" not in response.text

    def test_private_chat_hidden_from_others(self, client, user_id):
        chat_id = make_chat(user_id)
        sign_up(client, "ben@example.com")
        assert client.get(f"/chat/{chat_id}").status_code == 404

    def test_public_chat_is_read_only_for_others(self, client, user_id):
        chat_id = make_chat(user_id)
        update_chat_visibility_by_id(chat_id, "public")
        sign_up(client, "ben@example.com")

        response = client.get(f"/chat/{chat_id}")
        assert response.status_code == 200
        assert "Since when?" in response.text
        assert COMPOSER not in response.text

    def test_unknown_chat(self, client, user_id):
        assert client.get(f"/chat/{generate_uuid()}").status_code == 404


class TestSeedDoctors:

    CSV = (
        "name,degree,speciality,yoe,location,city,consult_fee\n"
        "Dr. Rao,MD,Neurology,12,Koregaon Park,Pune,800\n"
        ",MD,Neurology,3,,Pune,500\n"
        "Dr. Das,MBBS,Dermatology,,,Goa,\n"
    )

    def test_load_skips_incomplete_rows(self, tmp_path):
        path = tmp_path / "doctors.csv"
        path.write_text(self.CSV)

        doctors = load_doctors(path)
        assert [d["name"] for d in doctors] == ["Dr. Rao", "Dr. Das"]
        assert doctors[0]["consult_fee"] == 800
        assert doctors[1]["yoe"] is None

    def test_main_saves_doctors(self, tmp_path):
        path = tmp_path / "doctors.csv"
        path.write_text(self.CSV)

        assert seed_main([str(path)]) == 2
        [doctor] = get_doctor_by_speciality("Neurology")
        assert doctor["location"] == "Koregaon Park"
