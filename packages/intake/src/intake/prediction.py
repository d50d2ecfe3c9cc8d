"""Country-of-origin prediction via the Gemini generateContent API.

Sends one grounded completion request per submission and reads back the
first candidate's text. No retries.
"""

import logging

import httpx

from intake.config import IntakeConfig
from intake.errors import PredictionError
from intake.schemas import PREDICTION_FALLBACK_TEXT

logger = logging.getLogger("contact-intake-prediction")

SYSTEM_INSTRUCTION = "You are an expert geopolitical and name analysis assistant."


def build_prompt(name: str, phone_number: str) -> str:
    """Build the natural-language prompt embedding both fields verbatim."""
    return (
        f'Analyze the name "{name}" and the phone number "{phone_number}". '
        "Based on international dialing codes and typical naming conventions, "
        "predict the most likely country of origin for this person. "
        "Provide a single, concise country name and an explanation in a single paragraph."
    )


def build_payload(name: str, phone_number: str) -> dict:
    """Build the generateContent request body with search grounding."""
    return {
        "contents": [{"parts": [{"text": build_prompt(name, phone_number)}]}],
        "tools": [{"google_search": {}}],
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
    }


def extract_prediction_text(result: dict) -> str:
    """Pull candidates[0].content.parts[0].text, or the fallback string."""
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return PREDICTION_FALLBACK_TEXT
    return text or PREDICTION_FALLBACK_TEXT


class PredictionClient:
    """Asks the inference API for a contact's likely country of origin."""

    def __init__(
        self,
        config: IntakeConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Intake configuration with the API key, model and endpoint.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.config = config
        self._transport = transport

    @property
    def url(self) -> str:
        base = self.config.gemini_api_base_url.rstrip("/")
        return f"{base}/models/{self.config.gemini_model}:generateContent"

    async def predict(self, name: str, phone_number: str) -> str:
        """Predict the country of origin for a contact.

        Args:
            name: The contact's trimmed name.
            phone_number: The contact's digits-only phone number.

        Returns:
            The first candidate's text, or the fallback string when the
            response has none.

        Raises:
            PredictionError: On a non-2xx status or network failure.
        """
        payload = build_payload(name, phone_number)

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.config.prediction_timeout_seconds,
            ) as client:
                response = await client.post(
                    self.url,
                    params={"key": self.config.gemini_api_key},
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Gemini API request failed: {e!r}")
            raise PredictionError(f"Prediction request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Gemini API call failed with status {response.status_code}: "
                f"{response.text[:500]}"
            )
            raise PredictionError(
                f"API call failed with status: {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Gemini API returned invalid JSON: {e}")
            raise PredictionError("API returned an invalid response body") from e

        text = extract_prediction_text(result)
        logger.info(f"Prediction received: {len(text)} chars")
        return text
