"""
The `api` package defines Meddy's HTTP interface, the chat pipeline behind
it, and the supporting utilities and data models.

It integrates FastAPI routing, JWT cookie authentication and the streaming,
tool-calling LLM pipeline of the medical assistant.

Contents
--------
- fast_api
    Router with endpoints for:
        * User login, registration and logout
        * The session user's profile and chat history
        * Document revisions, suggestions and model selection

- chat_api
    Router for streaming a chat turn, deleting a chat and changing its visibility

- pages
    Jinja2-rendered chat pages

- models
    Pydantic schemas for request validation

- utils / auth
    Password hashing and JWT utilities, and the session user dependencies

- ai_models / prompts
    The selectable chat models and the prompt catalog

- data_stream / messages
    Server-sent event framing, and the conversions between UI, stored and
    LangChain message shapes

- tools / llm_pipeline
    The model's tools and the turn loop that streams, calls tools and
    persists the reply
"""
