"""
Pytest configuration for meddy tests.

Settings are read at import time, so the environment is prepared before any
``meddy`` module is imported: an in-memory SQLite database, console-only
logging and no MedLLaMA key (diagnoses go through the chat model).
"""

import json
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["APP_DEBUG"] = "false"
os.environ["INIT_MODE"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["HUGGINGFACE_API_KEY"] = ""

from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage, SystemMessage, ToolMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult

from meddy.api.llm_pipeline import ChatPipeline
from meddy.api.prompts import (
    CREATE_DOCUMENT_PROMPT,
    DIAGNOSIS_FALLBACK_PROMPT,
    SUGGESTIONS_PROMPT,
    SYSTEM_PROMPT,
    TITLE_PROMPT,
)
from meddy.database.core.database import drop_db, init_db
from meddy.database.core.funcs import get_user
from meddy.main import create_app

PATIENT_FILE = "# Patient File\n- Patient Name: Sam\n- Chief Complaints: Headache"
FOLLOW_UP = "Thanks, I have noted that. How long have you had the headache?"


def tool_call(name: str, args: dict, call_id: str) -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


def default_responder(messages: list[BaseMessage]) -> AIMessage:
    """Reply by prompt: nested generations first, then keywords in the latest user message."""
    system = messages[0].content if isinstance(messages[0], SystemMessage) else ""
    last = messages[-1]

    if system == TITLE_PROMPT:
        return AIMessage(content='Headache: "since Monday"')
    if system == CREATE_DOCUMENT_PROMPT:
        return AIMessage(content=PATIENT_FILE)
    if system == DIAGNOSIS_FALLBACK_PROMPT:
        return AIMessage(content="It sounds like a tension headache.")
    if system.startswith(SUGGESTIONS_PROMPT):
        return AIMessage(content=json.dumps({"suggestions": [{
            "originalSentence": "- Chief Complaints: Headache",
            "suggestedSentence": "- Chief Complaints: Headache for three days",
            "description": "Add the duration",
        }]}))
    if system != SYSTEM_PROMPT:
        return AIMessage(content="Updated document.")
    if isinstance(last, ToolMessage):
        return AIMessage(content=FOLLOW_UP)

    text = str(last.content).lower()
    if "my name is" in text:
        return tool_call("updateUserInfo", {"name": "Sam", "age": "34"}, "call_user")
    if "patient file" in text:
        return tool_call("createDocument", {"title": "Patient File", "kind": "text"}, "call_doc")
    if "neurologist" in text:
        return tool_call("getDoctorBySpeciality", {"speciality": "Neurology"}, "call_doctor")
    if "what could it be" in text:
        return tool_call("diagnoseIssue", {"symptoms": ["headache"], "duration": "3 days"}, "call_diag")
    if "broken tool" in text:
        return tool_call("updateDocument", {"id": "missing"}, "call_broken")
    return AIMessage(content="Hi, I'm Meddy! Could you please tell me what brings you in today?")


class ScriptedChatModel(BaseChatModel):
    """Chat model whose replies come from ``responder``; streams text word by word."""

    responder: Callable[[list[BaseMessage]], AIMessage] = default_responder
    calls: list[Any] = []

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def bind_tools(self, tools, **kwargs):
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.calls.append({"messages": messages, "kwargs": kwargs})
        return ChatResult(generations=[ChatGeneration(message=self.responder(messages))])

    def _stream(self, messages, stop=None, run_manager=None, **kwargs) -> Iterator[ChatGenerationChunk]:
        self.calls.append({"messages": messages, "kwargs": kwargs})
        reply = self.responder(messages)
        for word in str(reply.content).split(" ") if reply.content else []:
            yield ChatGenerationChunk(message=AIMessageChunk(content=f"{word} "))
        for index, call in enumerate(reply.tool_calls):
            yield ChatGenerationChunk(message=AIMessageChunk(
                content="",
                tool_call_chunks=[{
                    "name": call["name"],
                    "args": json.dumps(call["args"]),
                    "id": call["id"],
                    "index": index,
                }],
            ))


def parse_stream(body: str) -> list[dict]:
    """Decode ``data: {json}`` frames of an event-stream body."""
    return [
        json.loads(line[len("data: "):])
        for line in body.split("\n\n")
        if line.startswith("data: ")
    ]


def data_parts(parts: list[dict], data_type: str) -> list[dict]:
    return [part["data"] for part in parts if part["type"] == "data" and part["data"]["type"] == data_type]


@pytest.fixture(autouse=True)
def reset_db():
    drop_db()
    init_db()
    yield


@pytest.fixture
def chat_model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
def client(chat_model):
    app = create_app(ChatPipeline(model_factory=lambda api_identifier: chat_model, max_steps=5))
    with TestClient(app) as test_client:
        yield test_client


def sign_up(client: TestClient, email: str, password: str = "secret123") -> str:
    """Register ``email`` on ``client`` (replacing any session) and return the user id."""
    client.cookies.clear()
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.json()["status"] == "success"
    return get_user(email)[0]["id"]


@pytest.fixture
def user_id(client) -> str:
    return sign_up(client, "sam@example.com")
