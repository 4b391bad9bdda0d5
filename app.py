import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from gemini_client import RelayError, build_client
from retry_policy import RetryPolicy
from settings import get_settings

logger = logging.getLogger("gemini_relay.app")

app = FastAPI(title="Gemini Relay")

MISSING_TEXT_MESSAGE = 'Parameter "text" is required.'


class MissingParameter(RelayError):
    pass


# ---------------- HANDLER ----------------
class PromptRelay:
    """Relays one prompt. Without an explicit client, one is built from settings on first use."""

    def __init__(self, client=None, retry: Optional[RetryPolicy] = None):
        self.client = client
        self.retry = retry

    def _ensure_client(self):
        if self.client is None:
            settings = get_settings()
            self.client = build_client(settings)
            if self.retry is None:
                self.retry = RetryPolicy(settings.gemini_max_attempts, settings.gemini_retry_backoff_seconds)
        if self.retry is None:
            self.retry = RetryPolicy()
        return self.client

    def handle(self, text: Optional[str]) -> Tuple[int, Dict[str, Any]]:
        try:
            if not text:
                raise MissingParameter(MISSING_TEXT_MESSAGE)
            client = self._ensure_client()
            result = self.retry.call(client.generate, text)
        except MissingParameter as e:
            return 400, {"status": False, "error": str(e)}
        except Exception as e:
            logger.exception("Error in /ai/gemini endpoint")
            return 500, {"status": False, "error": str(e) or "Internal Server Error"}

        return 200, {"status": True, "result": result}

    def close(self):
        if self.client is not None:
            self.client.close()


def get_relay():
    relay = PromptRelay()
    try:
        yield relay
    finally:
        relay.close()


# ---------------- API ENDPOINTS ----------------
@app.get("/ai/gemini")
def ai_gemini(text: Optional[str] = None, relay: PromptRelay = Depends(get_relay)):
    status_code, body = relay.handle(text)
    return JSONResponse(status_code=status_code, content=body)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Gemini AI API is running. Try accessing /ai/gemini?text=your_query"
