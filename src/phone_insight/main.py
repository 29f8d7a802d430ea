from __future__ import annotations

import html
import logging
from pathlib import Path

from fastapi import BackgroundTasks, Depends, FastAPI, Form, Request, Response
from fastapi.responses import FileResponse, HTMLResponse
from starlette.datastructures import URL

from .config import Settings, get_settings
from .insight import InsightPayload, LookupRequest
from .mailer import Mailer, get_mailer
from .nexmo_client import NexmoClient, get_nexmo_client

logger = logging.getLogger(__name__)

app = FastAPI(title="phone-insight", version="0.1.0")

FORM_HTML_PATH = Path(__file__).resolve().parent / "static" / "phone_form.html"

CALLBACK_ROUTE = "nexmo_insights"


def build_callback_url(request: Request, email: str, settings: Settings) -> str:
    """
    URL Nexmo should POST the insight to.

    The requester's email rides along as a query parameter; it is the only
    link between the lookup and its callback.
    """
    if settings.public_base_url:
        url = URL(settings.public_base_url.rstrip("/") + "/" + CALLBACK_ROUTE)
    else:
        url = URL(str(request.url_for(CALLBACK_ROUTE)))
    return str(url.include_query_params(email=email))


def render_lookup_page(lookup: LookupRequest, insight: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Lookup submitted</title>
</head>
<body>
  <h1>Lookup submitted for {html.escape(lookup.phone)}</h1>
  <p>Results will be emailed to {html.escape(lookup.email)} when Nexmo calls back.</p>
  <pre>{html.escape(insight)}</pre>
  <p><a href="/">Look up another number</a></p>
</body>
</html>
"""


def deliver_insight(mailer: Mailer, email: str, payload: InsightPayload) -> None:
    """
    Background task: email the insight and log the outcome.

    The callback has already been acknowledged by the time this runs.
    """
    result = mailer.send_insight(email, payload)
    if not result.ok:
        logger.error(
            "Failed to email insight to %s: %s (%s)", email, result.error_kind, result.detail
        )


# --- Routes ---


@app.get("/")
def phone_form() -> FileResponse:
    """Form asking for a phone number and the email to send results to."""
    return FileResponse(FORM_HTML_PATH, media_type="text/html")


@app.post("/lookup", response_class=HTMLResponse)
def lookup(
    request: Request,
    phone: str = Form(""),
    email: str = Form(""),
    settings: Settings = Depends(get_settings),
    client: NexmoClient = Depends(get_nexmo_client),
) -> HTMLResponse:
    """
    Submit the number to Nexmo and show the immediate (acknowledgement) response.

    Errors from the outbound call are not caught; the requester gets a 500.
    """
    lookup_request = LookupRequest(phone=phone, email=email)
    callback_url = build_callback_url(request, lookup_request.email, settings)
    insight = client.lookup(lookup_request.phone, callback_url)
    return HTMLResponse(render_lookup_page(lookup_request, insight))


@app.post("/nexmo_insights", name=CALLBACK_ROUTE)
async def nexmo_insights(
    request: Request,
    background_tasks: BackgroundTasks,
    email: str = "",
    mailer: Mailer = Depends(get_mailer),
) -> Response:
    """
    Nexmo's async callback carrying the insight JSON.

    Always answers 200; mail delivery happens afterwards and its failures
    are only logged.

    NOTE: the sender of this request is not verified, so anyone who can
    reach this endpoint can make us send an email.
    """
    body = await request.body()
    payload = InsightPayload(raw=body.decode("utf-8", errors="replace"))

    background_tasks.add_task(deliver_insight, mailer, email, payload)

    return Response(status_code=200)
