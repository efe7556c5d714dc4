"""llm_pipeline
=================

Streaming, tool-calling chat pipeline for the medical assistant.

This module wires together:

- **Chat models** from the model catalog (:mod:`meddy.api.ai_models`), built
  through a pluggable ``model_factory``.
- **Tools** (:mod:`meddy.api.tools`) bound to the model for each turn.
- **The data stream** (:mod:`meddy.api.data_stream`) that forwards text
  deltas, tool calls and tool results to the browser as they happen.
- **Persistence** of the assistant's response messages once the turn ends.

The pipeline is encapsulated in :class:`ChatPipeline`, whose main entrypoint
is :meth:`ChatPipeline.run_turn`.

Notes
-----
- A turn runs at most ``max_steps`` model steps. A step that requests tools
  is followed by another step that sees the tool results.
- Tool exceptions never end the turn: the failing call gets an
  ``{"error": ...}`` result and the model decides what to do with it.
"""

import json
from typing import Callable

import httpx
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessageChunk, HumanMessage, SystemMessage, ToolMessage

from meddy.api.ai_models import AIModel
from meddy.api.data_stream import DataStream
from meddy.api.messages import (
    generate_uuid,
    sanitize_response_messages,
    strip_internal_tool_results,
    text_of,
    to_langchain_messages,
)
from meddy.api.prompts import SYSTEM_PROMPT, TITLE_PROMPT
from meddy.api.tools import ToolContext, build_tools
from meddy.database.config.config import settings
from meddy.database.core.funcs import save_messages
from meddy.utils.logger import get_logger

logger = get_logger("llm_pipeline")

TITLE_MAX_LENGTH = 80


class ChatPipeline:
    """Runs chat turns against the configured chat models.

    Args:
        model_factory: Callable turning a provider model identifier into a
            LangChain chat model.
        max_steps: Upper bound on model steps within one turn.
    """

    def __init__(self, model_factory: Callable[[str], BaseChatModel], max_steps: int = settings.MAX_STEPS):
        self.model_factory = model_factory
        self.max_steps = max_steps

    async def generate_title_from_user_message(self, message: dict) -> str:
        """Summarize the opening user message into a chat title.

        Args:
            message: Core user message opening the conversation.

        Returns:
            str: Title of at most 80 characters, without quotes or colons.
        """
        model = self.model_factory(settings.TITLE_MODEL)
        response = await model.ainvoke([
            SystemMessage(content=TITLE_PROMPT),
            HumanMessage(content=json.dumps(message, default=str)),
        ])
        title = text_of(response.content)
        for char in ('"', "'", ":"):
            title = title.replace(char, "")
        title = " ".join(title.split())
        return title[:TITLE_MAX_LENGTH] or "New chat"

    async def run_turn(
        self,
        stream: DataStream,
        model_spec: AIModel,
        core_messages: list[dict],
        user_id: str,
        chat_id: str,
    ) -> list[dict]:
        """Stream one assistant turn and persist its response messages.

        Each step streams ``text-delta`` parts, then executes the tool calls
        the model requested in order, emitting a ``tool-call`` and a
        ``tool-result`` part per call. The loop continues while tools were
        called and the step budget is not exhausted.

        Args:
            stream: Data stream of the HTTP response.
            model_spec: Catalog entry of the selected model.
            core_messages: Conversation so far, as core messages.
            user_id: Session user the turn runs for.
            chat_id: Chat the response messages are saved to.

        Returns:
            list[dict]: The response messages as persisted.
        """
        model = self.model_factory(model_spec.api_identifier)

        async with httpx.AsyncClient(timeout=30.0) as http_client:
            ctx = ToolContext(
                stream=stream,
                model=model,
                model_spec=model_spec,
                user_id=user_id,
                core_messages=core_messages,
                http_client=http_client,
            )
            tools = build_tools(ctx)
            tools_by_name = {tool.name: tool for tool in tools}
            bound = model.bind_tools(tools)

            history = to_langchain_messages(core_messages, system=SYSTEM_PROMPT)
            response_messages: list[dict] = []

            for step in range(self.max_steps):
                full: AIMessageChunk | None = None
                async for chunk in bound.astream(history):
                    full = chunk if full is None else full + chunk
                    delta = text_of(chunk.content)
                    if delta:
                        await stream.write_part({"type": "text-delta", "textDelta": delta})

                text = text_of(full.content) if full is not None else ""
                tool_calls = list(full.tool_calls) if full is not None else []

                if not tool_calls:
                    if text:
                        response_messages.append({"role": "assistant", "content": text})
                    await stream.write_part({"type": "finish-step", "finishReason": "stop"})
                    break

                history.append(full)
                call_parts = [{"type": "text", "text": text}] if text else []
                result_parts = []

                for call in tool_calls:
                    call_id = call.get("id") or generate_uuid()
                    name, args = call["name"], call.get("args") or {}
                    await stream.write_part({
                        "type": "tool-call",
                        "toolCallId": call_id,
                        "toolName": name,
                        "args": args,
                    })

                    result = await self._execute_tool(tools_by_name, name, args)

                    await stream.write_part({
                        "type": "tool-result",
                        "toolCallId": call_id,
                        "toolName": name,
                        "result": result,
                    })
                    history.append(ToolMessage(
                        content=json.dumps(result, default=str), tool_call_id=call_id, name=name
                    ))
                    call_parts.append({"type": "tool-call", "toolCallId": call_id, "toolName": name, "args": args})
                    result_parts.append({"type": "tool-result", "toolCallId": call_id, "toolName": name, "result": result})

                response_messages.append({"role": "assistant", "content": call_parts})
                response_messages.append({"role": "tool", "content": result_parts})
                await stream.write_part({"type": "finish-step", "finishReason": "tool-calls"})
            else:
                logger.warning(f"Chat {chat_id} reached the step limit of {self.max_steps}")

        await stream.write_part({"type": "finish", "finishReason": "stop"})
        return await self._persist(stream, chat_id, response_messages)

    async def _execute_tool(self, tools_by_name: dict, name: str, args: dict):
        tool = tools_by_name.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool {name}")
            return {"error": f"Unknown tool: {name}"}
        try:
            return await tool.ainvoke(args)
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            return {"error": str(e)}

    async def _persist(self, stream: DataStream, chat_id: str, response_messages: list[dict]) -> list[dict]:
        messages = strip_internal_tool_results(sanitize_response_messages(response_messages))
        rows = []
        try:
            for message in messages:
                message_id = generate_uuid()
                if message["role"] == "assistant":
                    await stream.write_message_annotation({"messageIdFromServer": message_id})
                rows.append({
                    "id": message_id,
                    "chat_id": chat_id,
                    "role": message["role"],
                    "content": message["content"],
                })
            save_messages(rows)
        except Exception:
            logger.exception(f"Failed to save chat {chat_id}")
        return rows
