import logging
from typing import Any, Dict, Optional

import httpx
import requests
from google import genai  # Gemini API
from google.genai import errors as genai_errors

from settings import Settings

logger = logging.getLogger("gemini_relay.client")

MISSING_KEY_MESSAGE = "GEMINI_API_KEY is not configured."
UNEXPECTED_SHAPE_MESSAGE = "Unexpected response structure from Gemini API."


# ---------------- ERRORS ----------------
class RelayError(Exception):
    pass


class UpstreamCallFailure(RelayError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UnexpectedResponseShape(RelayError):
    def __init__(self, message: str = UNEXPECTED_SHAPE_MESSAGE):
        super().__init__(message)


# ---------------- PAYLOAD / RESPONSE ----------------
def build_payload(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def extract_text(data: Any) -> str:
    """Return candidates[0].content.parts[0].text or raise UnexpectedResponseShape."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise UnexpectedResponseShape()
    if not isinstance(text, str):
        raise UnexpectedResponseShape()
    return text


def _failure_message(status_code: Any, body: Any) -> str:
    return f"Gemini API request failed with status {status_code}: {body}"


# ---------------- TRANSPORTS ----------------
class GeminiRestClient:
    """POSTs to the generateContent REST endpoint, key in the query string."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        api_base: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{api_base}/models/{model}:generateContent"
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise RelayError(MISSING_KEY_MESSAGE)

        try:
            resp = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=build_payload(prompt),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamCallFailure(f"Gemini API request failed: {e}") from e

        if not resp.ok:
            raise UpstreamCallFailure(
                _failure_message(resp.status_code, resp.text),
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError:
            raise UnexpectedResponseShape()
        return extract_text(data)

    def close(self):
        self.session.close()


class GeminiSdkClient:
    """Same contract as GeminiRestClient, through the google-genai client."""

    def __init__(self, api_key: Optional[str], model: str, client: Optional[genai.Client] = None):
        self.api_key = api_key
        self.model = model
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise RelayError(MISSING_KEY_MESSAGE)
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=build_payload(prompt)["contents"],
            )
        except genai_errors.APIError as e:
            raise UpstreamCallFailure(
                _failure_message(e.code, e.message),
                status_code=e.code,
                body=e.message,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamCallFailure(f"Gemini API request failed: {e}") from e

        return extract_text(response.model_dump(mode="json", exclude_none=True))

    def close(self):
        if self._owns_client and self._client is not None:
            # older google-genai releases have no Client.close
            close = getattr(self._client, "close", None)
            if close is not None:
                close()


def build_client(settings: Settings):
    if settings.gemini_transport == "sdk":
        return GeminiSdkClient(settings.gemini_api_key, settings.gemini_model)
    if settings.gemini_transport != "rest":
        logger.warning("Unknown GEMINI_TRANSPORT %r, using rest", settings.gemini_transport)
    return GeminiRestClient(
        settings.gemini_api_key,
        settings.gemini_model,
        settings.gemini_api_base,
        timeout=settings.gemini_timeout_seconds,
    )
