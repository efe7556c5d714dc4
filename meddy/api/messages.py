"""
Message shapes and the conversions between them.

Three shapes cross this module:

- **UI messages**, exchanged with the browser:
  ``{"id", "role", "content": str, "toolInvocations": [...]}`` where each
  invocation is ``{"state": "call" | "result", "toolCallId", "toolName", "args", "result"?}``.
- **Core messages**, stored in the database and fed to the model loop:
  ``{"role", "content"}`` with ``content`` either a string or a list of
  ``text`` / ``tool-call`` / ``tool-result`` parts.
- **LangChain messages**, the provider-facing framing.
"""

import json
import re
import uuid
from typing import Any

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

_JSON_BLOB = re.compile(r'\{[\s\S]*?"content":[\s\S]*?\}')
_BLANK_LINE = re.compile(r"^\s*[\r\n]", re.MULTILINE)


def generate_uuid() -> str:
    return str(uuid.uuid4())


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return True


def text_of(content: Any) -> str:
    """Concatenated text of a string or list-of-parts content."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return ""


def is_internal_result(result: Any) -> bool:
    return isinstance(result, dict) and bool(result.get("internalOnly"))


def convert_to_core_messages(ui_messages: list[dict]) -> list[dict]:
    """
    Convert UI messages to core messages.

    An assistant message with finished tool invocations becomes an assistant
    message carrying ``tool-call`` parts followed by a ``tool`` message carrying
    the matching ``tool-result`` parts. Invocations that never produced a
    result are dropped, since the provider rejects unanswered tool calls.
    """
    core: list[dict] = []
    for message in ui_messages:
        role = message.get("role")
        content = message.get("content") or ""

        if role in ("system", "user"):
            core.append({"role": role, "content": content})
            continue

        if role != "assistant":
            continue

        finished = [
            invocation
            for invocation in message.get("toolInvocations") or []
            if invocation.get("state") == "result"
        ]
        if not finished:
            if content:
                core.append({"role": "assistant", "content": content})
            continue

        parts: list[dict] = []
        if content:
            parts.append({"type": "text", "text": content})
        for invocation in finished:
            parts.append({
                "type": "tool-call",
                "toolCallId": invocation["toolCallId"],
                "toolName": invocation["toolName"],
                "args": invocation.get("args") or {},
            })
        core.append({"role": "assistant", "content": parts})
        core.append({
            "role": "tool",
            "content": [
                {
                    "type": "tool-result",
                    "toolCallId": invocation["toolCallId"],
                    "toolName": invocation["toolName"],
                    "result": invocation.get("result"),
                }
                for invocation in finished
            ],
        })
    return core


def get_most_recent_user_message(messages: list[dict]) -> dict | None:
    user_messages = [message for message in messages if message.get("role") == "user"]
    return user_messages[-1] if user_messages else None


def sanitize_response_messages(messages: list[dict]) -> list[dict]:
    """
    Clean model output before it is persisted.

    String contents lose embedded JSON blobs that echo tool output and any
    blank lines; messages left with nothing but whitespace are dropped.
    """
    sanitized = []
    for message in messages:
        content = message.get("content")
        if isinstance(content, str):
            cleaned = _BLANK_LINE.sub("", _JSON_BLOB.sub("", content))
            if not cleaned.strip():
                continue
            message = {**message, "content": cleaned}
        sanitized.append(message)
    return sanitized


def strip_internal_tool_results(messages: list[dict]) -> list[dict]:
    """
    Remove tool exchanges flagged ``internalOnly``.

    Both the ``tool-result`` part and the ``tool-call`` part that asked for it
    are removed so the stored history never holds an unanswered call.
    """
    internal_ids = {
        part["toolCallId"]
        for message in messages
        if message.get("role") == "tool"
        for part in message.get("content") or []
        if is_internal_result(part.get("result"))
    }
    if not internal_ids:
        return messages

    stripped = []
    for message in messages:
        content = message.get("content")
        if isinstance(content, list):
            content = [
                part for part in content
                if part.get("toolCallId") not in internal_ids
            ]
            if not content:
                continue
            message = {**message, "content": content}
        stripped.append(message)
    return stripped


def convert_to_ui_messages(messages: list[dict]) -> list[dict]:
    """Fold stored core messages back into UI messages, attaching tool results to their calls."""
    ui_messages: list[dict] = []
    for message in messages:
        content = message.get("content")

        if message.get("role") == "tool":
            results = {
                part["toolCallId"]: part.get("result")
                for part in content or []
                if part.get("type") == "tool-result"
            }
            for ui_message in ui_messages:
                for invocation in ui_message["toolInvocations"]:
                    if invocation["toolCallId"] in results:
                        invocation["state"] = "result"
                        invocation["result"] = results[invocation["toolCallId"]]
            continue

        tool_invocations = []
        if isinstance(content, list):
            for part in content:
                if part.get("type") == "tool-call":
                    tool_invocations.append({
                        "state": "call",
                        "toolCallId": part["toolCallId"],
                        "toolName": part["toolName"],
                        "args": part.get("args") or {},
                    })

        ui_messages.append({
            "id": message["id"],
            "role": message["role"],
            "content": text_of(content),
            "toolInvocations": tool_invocations,
            "createdAt": message.get("createdAt"),
        })
    return ui_messages


def sanitize_ui_messages(messages: list[dict]) -> list[dict]:
    """Drop assistant tool invocations that never produced a result, then empty messages."""
    sanitized = []
    for message in messages:
        invocations = message.get("toolInvocations") or []
        if message.get("role") == "assistant" and invocations:
            invocations = [
                invocation for invocation in invocations
                if invocation.get("state") == "result"
            ]
            message = {**message, "toolInvocations": invocations}
        if message.get("content") or invocations:
            sanitized.append(message)
    return sanitized



def to_langchain_messages(core_messages: list[dict], system: str | None = None) -> list[BaseMessage]:
    """Frame core messages for the provider, optionally prefixed by a system prompt."""
    framed: list[BaseMessage] = []
    if system:
        framed.append(SystemMessage(content=system))

    for message in core_messages:
        role = message.get("role")
        content = message.get("content")

        if role == "system":
            framed.append(SystemMessage(content=text_of(content)))
        elif role == "user":
            framed.append(HumanMessage(content=text_of(content)))
        elif role == "assistant":
            tool_calls = [
                {"name": part["toolName"], "args": part.get("args") or {}, "id": part["toolCallId"]}
                for part in content
                if part.get("type") == "tool-call"
            ] if isinstance(content, list) else []
            framed.append(AIMessage(content=text_of(content), tool_calls=tool_calls))
        elif role == "tool":
            for part in content or []:
                framed.append(ToolMessage(
                    content=json.dumps(part.get("result"), default=str),
                    tool_call_id=part["toolCallId"],
                    name=part.get("toolName"),
                ))
    return framed
