"""tools
=========

Tools the chat model may call during a turn.

Each tool is a LangChain :class:`~langchain_core.tools.StructuredTool` with a
pydantic argument schema. Tools are built per turn by :func:`build_tools`
over a :class:`ToolContext`, which gives them the turn's data stream, the
selected chat model, the session user and the conversation so far.

Tools that generate documents stream their output to the browser as
``data`` parts (``id``, ``title``, ``kind``, ``clear``, ``text-delta``,
``finish``, ``suggestion``) while the main reply is still streaming.
Results flagged ``internalOnly`` are shown to the model but never stored.
"""

import asyncio
import json
import random
from dataclasses import dataclass
from typing import AsyncIterator, Literal

import httpx
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from meddy.api.ai_models import AIModel
from meddy.api.data_stream import DataStream
from meddy.api.messages import generate_uuid, text_of
from meddy.api.prompts import (
    CODE_PROMPT,
    CREATE_DOCUMENT_PROMPT,
    DIAGNOSIS_DISCLAIMER,
    DIAGNOSIS_FALLBACK_PROMPT,
    SUGGESTIONS_PROMPT,
    VALIDATE_PATIENT_FILE_PROMPT,
    medllama_prompt,
    update_document_prompt,
)
from meddy.database.config.config import settings
from meddy.database.core.funcs import (
    get_doctor_by_speciality,
    get_document_by_id,
    save_document,
    save_suggestions,
    update_user_info,
)
from meddy.utils.logger import get_logger

logger = get_logger("tools")

DIAGNOSIS_CHUNK_SIZE = 10
DOCTORS_PER_RESULT = 2
MAX_SUGGESTIONS = 5


class DiagnosisServiceError(RuntimeError):
    pass


@dataclass
class ToolContext:
    stream: DataStream
    model: BaseChatModel
    model_spec: AIModel
    user_id: str
    core_messages: list[dict]
    http_client: httpx.AsyncClient


async def stream_completion(
    model: BaseChatModel,
    system: str,
    prompt: str,
    prediction: str | None = None,
) -> AsyncIterator[str]:
    """Stream the text deltas of a single system + prompt generation.

    Args:
        model: Chat model to generate with.
        system: System instruction.
        prompt: User prompt.
        prediction: Optional predicted output, forwarded to providers that
            support predicted outputs.

    Yields:
        str: Non-empty text deltas in arrival order.
    """
    runnable = model
    if prediction is not None:
        runnable = model.bind(prediction={"type": "content", "content": prediction})
    async for chunk in runnable.astream([SystemMessage(content=system), HumanMessage(content=prompt)]):
        delta = text_of(chunk.content)
        if delta:
            yield delta


def select_doctors(doctors: list[dict], city: str | None = None, rng: random.Random | None = None) -> list[dict]:
    """
    Pick up to two doctors, preferring a single city.

    With ``city`` and doctors practising there, the pick comes from that city.
    Otherwise a random city holding at least two doctors is chosen; when no
    city qualifies the pick is made from all doctors.
    """
    rng = rng or random.Random()

    by_city: dict[str, list[dict]] = {}
    for doctor in doctors:
        by_city.setdefault(doctor.get("city") or "Unknown", []).append(doctor)

    if city and by_city.get(city):
        pool = by_city[city]
    else:
        cities = [name for name, members in by_city.items() if len(members) >= DOCTORS_PER_RESULT]
        pool = by_city[rng.choice(cities)] if cities else doctors

    return rng.sample(pool, min(DOCTORS_PER_RESULT, len(pool)))


# ------------------------ Argument schemas ------------------------


class WeatherArgs(BaseModel):
    latitude: float
    longitude: float


class CreateDocumentArgs(BaseModel):
    title: str
    kind: Literal["text", "code"]


class UpdateDocumentArgs(BaseModel):
    id: str = Field(description="The ID of the document to update")
    description: str = Field(description="The description of changes that need to be made")


class RequestSuggestionsArgs(BaseModel):
    documentId: str = Field(description="The ID of the document to request edits")


class DoctorSearchArgs(BaseModel):
    speciality: str = Field(description="The medical specialty to search for")
    city: str | None = Field(default=None, description="Optional city to filter doctors")


class ValidatePatientFileArgs(BaseModel):
    documentId: str = Field(description="The ID of the document to validate")
    messageNumber: int = Field(description="Current message number in the chat")


class UserInfoArgs(BaseModel):
    name: str | None = None
    age: str | None = None


class DiagnosisArgs(BaseModel):
    symptoms: list[str] = Field(description="List of symptoms reported by the patient")
    duration: str | None = Field(default=None, description="Duration of symptoms")
    severity: str | None = Field(default=None, description="Severity of symptoms")
    age: str | None = Field(default=None, description="Patient age")
    gender: str | None = Field(default=None, description="Patient gender")
    medicalHistory: list[str] | None = Field(default=None, description="Relevant medical history")
    currentMedications: list[str] | None = Field(default=None, description="Current medications")


class SuggestionItem(BaseModel):
    originalSentence: str = Field(description="The original sentence")
    suggestedSentence: str = Field(description="The suggested sentence")
    description: str = Field(description="The description of the suggestion")


class SuggestionList(BaseModel):
    suggestions: list[SuggestionItem]


# ------------------------ Tools ------------------------


def build_tools(ctx: ToolContext) -> list[StructuredTool]:
    """Bind every tool of a turn to ``ctx``."""
    stream = ctx.stream

    def prediction_for(content: str | None) -> str | None:
        # predicted outputs are an OpenAI feature
        return content if ctx.model_spec.provider == "openai" and content else None

    async def stream_into_block(system: str, prompt: str, prediction: str | None = None) -> str:
        draft = ""
        async for delta in stream_completion(ctx.model, system, prompt, prediction):
            draft += delta
            await stream.write_data({"type": "text-delta", "content": delta})
        await stream.write_data({"type": "finish", "content": ""})
        return draft

    async def get_weather(latitude: float, longitude: float) -> dict:
        response = await ctx.http_client.get(
            settings.WEATHER_URL,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": "temperature_2m",
                "hourly": "temperature_2m",
                "daily": "sunrise,sunset",
                "timezone": "auto",
            },
        )
        response.raise_for_status()
        return response.json()

    async def create_document(title: str, kind: str) -> dict:
        document_id = generate_uuid()
        await stream.write_data({"type": "id", "content": document_id})
        await stream.write_data({"type": "title", "content": title})
        await stream.write_data({"type": "kind", "content": kind})
        await stream.write_data({"type": "clear", "content": ""})

        system = CODE_PROMPT if kind == "code" else CREATE_DOCUMENT_PROMPT
        draft = await stream_into_block(system, title)

        save_document(id=document_id, title=title, kind=kind, content=draft, user_id=ctx.user_id)
        logger.info(f"Created document {document_id} ({kind})")

        return {
            "id": document_id,
            "title": title,
            "kind": kind,
            "content": "A patient file was created and is now visible to the user.",
        }

    async def update_document(id: str, description: str) -> dict:
        document = get_document_by_id(id)
        if not document:
            return {"error": "Document not found"}

        current = document["content"]
        await stream.write_data({"type": "clear", "content": document["title"]})

        draft = await stream_into_block(
            update_document_prompt(current, document["kind"]),
            description,
            prediction_for(current),
        )

        save_document(id=id, title=document["title"], kind=document["kind"], content=draft, user_id=ctx.user_id)

        return {
            "id": id,
            "title": document["title"],
            "kind": document["kind"],
            "content": "The patient file has been updated successfully.",
        }

    async def request_suggestions(documentId: str) -> dict:
        document = get_document_by_id(documentId)
        if not document or not document["content"]:
            return {"error": "Document not found"}

        parser = PydanticOutputParser(pydantic_object=SuggestionList)
        chain = ctx.model | parser
        parsed: SuggestionList = await chain.ainvoke([
            SystemMessage(content=f"{SUGGESTIONS_PROMPT}\n\n{parser.get_format_instructions()}"),
            HumanMessage(content=document["content"]),
        ])

        suggestions = []
        for item in parsed.suggestions[:MAX_SUGGESTIONS]:
            suggestion = {
                "id": generate_uuid(),
                "documentId": documentId,
                "originalText": item.originalSentence,
                "suggestedText": item.suggestedSentence,
                "description": item.description,
                "isResolved": False,
            }
            await stream.write_data({"type": "suggestion", "content": suggestion})
            suggestions.append(suggestion)

        save_suggestions([
            {
                "id": suggestion["id"],
                "document_id": documentId,
                "document_created_at": document["createdAt"],
                "original_text": suggestion["originalText"],
                "suggested_text": suggestion["suggestedText"],
                "description": suggestion["description"],
                "is_resolved": False,
                "user_id": ctx.user_id,
            }
            for suggestion in suggestions
        ])

        return {
            "id": documentId,
            "title": document["title"],
            "kind": document["kind"],
            "message": "Suggestions have been added to the document",
        }

    async def get_doctors(speciality: str, city: str | None = None) -> dict:
        doctors = get_doctor_by_speciality(speciality)
        if not doctors:
            return {
                "error": "No doctors found for this specialty",
                "speciality": speciality,
                "internalOnly": True,
            }

        doctor_data = [
            {
                "name": doctor["name"],
                "degree": doctor["degree"],
                "yoe": doctor["yoe"],
                "location": doctor["location"],
                "city": doctor["city"],
                "speciality": speciality,
                "consultFee": doctor["consultFee"],
            }
            for doctor in select_doctors(doctors, city)
        ]
        result = {
            "message": f"Found {len(doctors)} doctor(s) specializing in {speciality}",
            "doctorData": doctor_data,
            "internalOnly": True,
        }
        await stream.write_data({"type": "internal-tool-response", "content": json.dumps(result)})
        return result

    async def validate_patient_file(documentId: str, messageNumber: int) -> dict:
        document = get_document_by_id(documentId)
        if not document:
            return {"error": "Document not found", "documentId": documentId}

        facts = [
            {"messageNum": index + 1, "content": message["content"]}
            for index, message in enumerate(ctx.core_messages)
            if message["role"] == "user"
        ]
        await stream.write_data({"type": "clear", "content": document["title"]})

        prompt = json.dumps({
            "currentContent": document["content"],
            "facts": facts,
            "messageNumber": messageNumber,
        })
        draft = await stream_into_block(VALIDATE_PATIENT_FILE_PROMPT, prompt, prediction_for(document["content"]))

        save_document(
            id=documentId, title=document["title"], kind=document["kind"], content=draft, user_id=ctx.user_id
        )

        return {
            "id": documentId,
            "title": document["title"],
            "kind": document["kind"],
            "content": "The patient file has been validated and updated with references.",
        }

    async def set_user_info(name: str | None = None, age: str | None = None) -> dict:
        try:
            update_user_info(ctx.user_id, name=name, age=age)
        except Exception:
            logger.exception("Failed to update user info")
            return {"error": "Failed to update user information", "internalOnly": True}

        result = {
            "message": "User information updated successfully",
            "updates": {"name": name, "age": age},
            "internalOnly": True,
        }
        await stream.write_data({"type": "internal-tool-response", "content": json.dumps(result)})
        return result

    async def query_medllama(prompt: str) -> list[dict]:
        if not settings.HUGGINGFACE_API_KEY:
            raise DiagnosisServiceError("HUGGINGFACE_API_KEY is not configured")

        try:
            response = await ctx.http_client.post(
                settings.MEDLLAMA_URL,
                headers={"Authorization": f"Bearer {settings.HUGGINGFACE_API_KEY}"},
                json={
                    "inputs": prompt,
                    "parameters": {
                        "max_new_tokens": 500,
                        "temperature": 0.7,
                        "top_p": 0.9,
                        "do_sample": True,
                        "return_full_text": False,
                    },
                },
            )
        except httpx.HTTPError as e:
            raise DiagnosisServiceError(f"MedLLaMA request failed: {e}") from e

        if response.status_code >= 400:
            raise DiagnosisServiceError(f"MedLLaMA error {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise DiagnosisServiceError(f"MedLLaMA returned a non-JSON body: {response.text[:200]}") from e
        if (
            not isinstance(result, list)
            or not result
            or not isinstance(result[0], dict)
            or not isinstance(result[0].get("generated_text"), str)
        ):
            raise DiagnosisServiceError("Invalid response format")
        return result

    async def diagnose_issue(
        symptoms: list[str],
        duration: str | None = None,
        severity: str | None = None,
        age: str | None = None,
        gender: str | None = None,
        medicalHistory: list[str] | None = None,
        currentMedications: list[str] | None = None,
    ) -> dict:
        prompt = medllama_prompt(symptoms, duration, severity, age, gender, medicalHistory, currentMedications)

        try:
            result = await query_medllama(prompt)
        except DiagnosisServiceError as e:
            logger.warning(f"Falling back to chat model for diagnosis: {e}")
            analysis = ""
            patient = json.dumps({
                "symptoms": symptoms,
                "duration": duration,
                "severity": severity,
                "age": age,
                "gender": gender,
                "medicalHistory": medicalHistory,
                "currentMedications": currentMedications,
            })
            async for delta in stream_completion(ctx.model, DIAGNOSIS_FALLBACK_PROMPT, patient):
                analysis += delta
                await stream.write_data({"type": "text-delta", "content": delta, "internalOnly": True})
            return {"analysis": analysis, "disclaimer": DIAGNOSIS_DISCLAIMER, "internalOnly": True}

        await stream.write_data({
            "type": "internal-tool-response",
            "content": {"rawResponse": result, "internalOnly": True},
        })

        analysis = result[0]["generated_text"]
        for start in range(0, len(analysis), DIAGNOSIS_CHUNK_SIZE):
            chunk = analysis[start:start + DIAGNOSIS_CHUNK_SIZE]
            await stream.write_data({"type": "text-delta", "content": chunk, "internalOnly": True})
            await asyncio.sleep(0.01)

        return {"analysis": analysis, "disclaimer": DIAGNOSIS_DISCLAIMER, "internalOnly": True}

    return [
        StructuredTool.from_function(
            coroutine=get_weather,
            name="getWeather",
            description="Get the current weather at a location",
            args_schema=WeatherArgs,
        ),
        StructuredTool.from_function(
            coroutine=create_document,
            name="createDocument",
            description="Create a patient file or other medical document",
            args_schema=CreateDocumentArgs,
        ),
        StructuredTool.from_function(
            coroutine=update_document,
            name="updateDocument",
            description="Update the patient file or medical document with new information",
            args_schema=UpdateDocumentArgs,
        ),
        StructuredTool.from_function(
            coroutine=request_suggestions,
            name="requestSuggestions",
            description="Request suggestions for a document",
            args_schema=RequestSuggestionsArgs,
        ),
        StructuredTool.from_function(
            coroutine=get_doctors,
            name="getDoctorBySpeciality",
            description="Query doctors database by medical specialty and optionally filter by city",
            args_schema=DoctorSearchArgs,
        ),
        StructuredTool.from_function(
            coroutine=validate_patient_file,
            name="validatePatientFile",
            description="Validate patient file content against chat history",
            args_schema=ValidatePatientFileArgs,
        ),
        StructuredTool.from_function(
            coroutine=set_user_info,
            name="updateUserInfo",
            description="Update user profile with name and age",
            args_schema=UserInfoArgs,
        ),
        StructuredTool.from_function(
            coroutine=diagnose_issue,
            name="diagnoseIssue",
            description="Analyze symptoms and provide a preliminary diagnosis.",
            args_schema=DiagnosisArgs,
        ),
    ]
