"""
Catalog of the chat models a user can pick, and the factory that turns an
API identifier into a LangChain chat model.
"""

from dataclasses import dataclass

from langchain_openai import ChatOpenAI

from meddy.database.config.config import settings


@dataclass(frozen=True)
class AIModel:
    id: str
    label: str
    api_identifier: str
    description: str
    provider: str = "openai"


MODELS: list[AIModel] = [
    AIModel(
        id="gpt-4o-mini",
        label="GPT 4o mini",
        api_identifier="gpt-4o-mini",
        description="Small model for fast, lightweight tasks",
    ),
    AIModel(
        id="gpt-4o",
        label="GPT 4o",
        api_identifier="gpt-4o",
        description="For complex, multi-step tasks",
    ),
    AIModel(
        id="ministral-3b-latest",
        label="Ministral-3b-latest",
        api_identifier="open-mistral-7b",
        description="Not private: anonymized data sent to Mistral",
        provider="mistral",
    ),
]

DEFAULT_MODEL_NAME = "ministral-3b-latest"


def find_model(model_id: str | None) -> AIModel | None:
    return next((model for model in MODELS if model.id == model_id), None)


def is_mistral(api_identifier: str) -> bool:
    return "mistral" in api_identifier or "ministral" in api_identifier


def custom_model(api_identifier: str) -> ChatOpenAI:
    """
    Build a streaming chat model for ``api_identifier``.

    Mistral models are reached through Mistral's OpenAI-compatible endpoint,
    everything else through OpenAI.
    """
    if is_mistral(api_identifier):
        return ChatOpenAI(
            model=api_identifier,
            api_key=settings.MISTRAL_API_KEY or None,
            base_url=settings.MISTRAL_BASE_URL,
            temperature=0.7,
        )
    return ChatOpenAI(model=api_identifier, api_key=settings.API_KEY or None, temperature=0.7)
