"""Example FastAPI log collector for trying out logship locally.

Run with:
    uvicorn examples.collector_app:app --reload

Endpoints:
    POST /logs     - Accepts one JSON log event per request
    GET  /logs     - Returns the events received so far
    POST /slack    - Accepts Slack-shaped webhook payloads
"""

from typing import Any

from fastapi import FastAPI, Request

app = FastAPI(title="Log Collector Example")

received: list[dict[str, Any]] = []


@app.post("/logs", status_code=202)
async def ingest(request: Request) -> dict[str, str]:
    """Store a generic log event."""
    received.append(await request.json())
    return {"status": "accepted"}


@app.get("/logs")
async def list_logs() -> list[dict[str, Any]]:
    """Return every event received since startup."""
    return received


@app.post("/slack")
async def slack_webhook(request: Request) -> str:
    """Mimic a Slack incoming webhook, which answers with plain ``ok``."""
    payload = await request.json()
    received.append({"slack": payload})
    return "ok"
