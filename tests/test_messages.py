"""
Tests for the conversions between UI, stored and LangChain message shapes.
"""

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from meddy.api.messages import (
    convert_to_core_messages,
    convert_to_ui_messages,
    get_most_recent_user_message,
    sanitize_response_messages,
    sanitize_ui_messages,
    strip_internal_tool_results,
    to_langchain_messages,
)

WEATHER_INVOCATION = {
    "state": "result",
    "toolCallId": "call_1",
    "toolName": "getWeather",
    "args": {"latitude": 52.5, "longitude": 13.4},
    "result": {"current": {"temperature_2m": 18}},
}


class TestConvertToCoreMessages:

    def test_plain_messages(self):
        core = convert_to_core_messages([
            {"id": "1", "role": "user", "content": "I have a headache"},
            {"id": "2", "role": "assistant", "content": "Since when?"},
        ])
        assert core == [
            {"role": "user", "content": "I have a headache"},
            {"role": "assistant", "content": "Since when?"},
        ]

    def test_tool_invocations_split_into_call_and_result(self):
        core = convert_to_core_messages([
            {"id": "1", "role": "assistant", "content": "Checking", "toolInvocations": [WEATHER_INVOCATION]},
        ])
        assert core[0]["role"] == "assistant"
        assert core[0]["content"][0] == {"type": "text", "text": "Checking"}
        assert core[0]["content"][1]["type"] == "tool-call"
        assert core[1] == {
            "role": "tool",
            "content": [{
                "type": "tool-result",
                "toolCallId": "call_1",
                "toolName": "getWeather",
                "result": {"current": {"temperature_2m": 18}},
            }],
        }

    def test_unfinished_invocations_are_dropped(self):
        pending = {**WEATHER_INVOCATION, "state": "call"}
        pending.pop("result")
        core = convert_to_core_messages([
            {"id": "1", "role": "assistant", "content": "", "toolInvocations": [pending]},
        ])
        assert core == []


def test_most_recent_user_message():
    messages = [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "reply"},
        {"role": "user", "content": "second"},
    ]
    assert get_most_recent_user_message(messages)["content"] == "second"
    assert get_most_recent_user_message([{"role": "assistant", "content": "hi"}]) is None


class TestSanitizeResponseMessages:

    def test_removes_json_blobs_and_blank_lines(self):
        [message] = sanitize_response_messages([{
            "role": "assistant",
            "content": 'Here it is {"id": "1", "content": "file"}\n\n\nAnything else?',
        }])
        assert message["content"] == "Here it is \nAnything else?"

    def test_drops_messages_left_empty(self):
        messages = sanitize_response_messages([
            {"role": "assistant", "content": '{"content": "only a blob"}'},
            {"role": "assistant", "content": "kept"},
        ])
        assert [m["content"] for m in messages] == ["kept"]

    def test_list_contents_untouched(self):
        parts = [{"type": "tool-call", "toolCallId": "c", "toolName": "getWeather", "args": {}}]
        assert sanitize_response_messages([{"role": "assistant", "content": parts}])[0]["content"] == parts


class TestStripInternalToolResults:

    def test_removes_internal_exchange(self):
        messages = [
            {"role": "assistant", "content": [
                {"type": "text", "text": "Let me look."},
                {"type": "tool-call", "toolCallId": "c1", "toolName": "getDoctorBySpeciality", "args": {}},
            ]},
            {"role": "tool", "content": [
                {"type": "tool-result", "toolCallId": "c1", "toolName": "getDoctorBySpeciality",
                 "result": {"doctorData": [], "internalOnly": True}},
            ]},
            {"role": "assistant", "content": "Dr. Rao is available."},
        ]
        assert strip_internal_tool_results(messages) == [
            {"role": "assistant", "content": [{"type": "text", "text": "Let me look."}]},
            {"role": "assistant", "content": "Dr. Rao is available."},
        ]

    def test_keeps_regular_results(self):
        messages = [
            {"role": "assistant", "content": [
                {"type": "tool-call", "toolCallId": "c1", "toolName": "createDocument", "args": {}},
            ]},
            {"role": "tool", "content": [
                {"type": "tool-result", "toolCallId": "c1", "toolName": "createDocument", "result": {"id": "d"}},
            ]},
        ]
        assert strip_internal_tool_results(messages) == messages


class TestUiMessages:

    def test_tool_results_fold_into_invocations(self):
        stored = [
            {"id": "m1", "role": "user", "content": "Weather?", "createdAt": None},
            {"id": "m2", "role": "assistant", "createdAt": None, "content": [
                {"type": "text", "text": "Checking"},
                {"type": "tool-call", "toolCallId": "c1", "toolName": "getWeather", "args": {"latitude": 1}},
            ]},
            {"id": "m3", "role": "tool", "createdAt": None, "content": [
                {"type": "tool-result", "toolCallId": "c1", "toolName": "getWeather", "result": {"ok": True}},
            ]},
        ]
        ui = convert_to_ui_messages(stored)
        assert [m["id"] for m in ui] == ["m1", "m2"]
        assert ui[1]["content"] == "Checking"
        assert ui[1]["toolInvocations"] == [{
            "state": "result",
            "toolCallId": "c1",
            "toolName": "getWeather",
            "args": {"latitude": 1},
            "result": {"ok": True},
        }]

    def test_sanitize_drops_unanswered_invocations(self):
        messages = sanitize_ui_messages([
            {"id": "1", "role": "assistant", "content": "", "toolInvocations": [
                {"state": "call", "toolCallId": "c1", "toolName": "getWeather", "args": {}},
            ]},
            {"id": "2", "role": "assistant", "content": "Done", "toolInvocations": [
                WEATHER_INVOCATION,
                {"state": "call", "toolCallId": "c2", "toolName": "getWeather", "args": {}},
            ]},
        ])
        assert [m["id"] for m in messages] == ["2"]
        assert messages[0]["toolInvocations"] == [WEATHER_INVOCATION]


def test_to_langchain_messages():
    framed = to_langchain_messages([
        {"role": "user", "content": "Weather?"},
        {"role": "assistant", "content": [
            {"type": "tool-call", "toolCallId": "c1", "toolName": "getWeather", "args": {"latitude": 1}},
        ]},
        {"role": "tool", "content": [
            {"type": "tool-result", "toolCallId": "c1", "toolName": "getWeather", "result": {"ok": True}},
        ]},
    ], system="Be kind")

    assert [type(m) for m in framed] == [SystemMessage, HumanMessage, AIMessage, ToolMessage]
    assert framed[2].tool_calls[0]["name"] == "getWeather"
    assert framed[3].tool_call_id == "c1"
    assert framed[3].content == '{"ok": true}'
