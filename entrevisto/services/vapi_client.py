"""
Client for the Vapi voice-AI REST API.

One instance is built at startup from settings (see ``build_vapi_client``) and shared by
all requests; ``httpx.Client`` is thread-safe for this use.
"""
import logging

import httpx

from entrevisto.config import settings

logger = logging.getLogger(__name__)

BROWSER_CUSTOMER = "browser"


class VoiceProviderError(RuntimeError):
    """A Vapi request failed or returned an unusable response."""


class VoiceProviderConfigError(RuntimeError):
    """Vapi credentials are missing; raised at startup."""


class VapiClient:
    def __init__(
        self,
        api_key: str,
        assistant_id: str,
        base_url: str = "https://api.vapi.ai",
        phone_number_id: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.assistant_id = assistant_id
        self.phone_number_id = phone_number_id
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    def _post(self, path: str, payload: dict) -> dict:
        try:
            resp = self._http.post(path, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Vapi request failed: path=%s err=%s", path, e)
            raise VoiceProviderError(f"Vapi request to {path} failed: {e}") from e
        if resp.status_code >= 400:
            logger.warning("Vapi error response: path=%s status=%d body=%s", path, resp.status_code, resp.text[:500])
            raise VoiceProviderError(f"Vapi {path} returned {resp.status_code}: {resp.text[:300]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise VoiceProviderError(f"Vapi {path} returned non-JSON body") from e
        if not isinstance(data, dict) or not data.get("id"):
            raise VoiceProviderError(f"Vapi {path} response missing id")
        return data

    def create_call(self, customer_number: str, metadata: dict, assistant_id: str | None = None) -> dict:
        """
        Start a call with the interviewer assistant.

        ``customer_number`` is a phone number, or ``"browser"`` for a web call that the
        frontend joins with the returned call.
        """
        payload = {"assistantId": assistant_id or self.assistant_id, "metadata": metadata}
        if customer_number == BROWSER_CUSTOMER:
            path = "/call/web"
        else:
            path = "/call"
            payload["customer"] = {"number": customer_number}
            if self.phone_number_id:
                payload["phoneNumberId"] = self.phone_number_id
        data = self._post(path, payload)
        logger.info("Vapi call created: id=%s path=%s", data["id"], path)
        return data

    def create_assistant(self, config: dict) -> dict:
        data = self._post("/assistant", config)
        logger.info("Vapi assistant created: id=%s", data["id"])
        return data

    def close(self) -> None:
        self._http.close()


def build_vapi_client(transport: httpx.BaseTransport | None = None) -> VapiClient:
    missing = [
        name
        for name, value in (("VAPI_API_KEY", settings.vapi_api_key), ("VAPI_ASSISTANT_ID", settings.vapi_assistant_id))
        if not value
    ]
    if missing:
        raise VoiceProviderConfigError(f"Vapi is not configured; missing {', '.join(missing)}")
    return VapiClient(
        api_key=settings.vapi_api_key,
        assistant_id=settings.vapi_assistant_id,
        base_url=settings.vapi_base_url,
        phone_number_id=settings.vapi_phone_number_id,
        timeout=settings.vapi_timeout_seconds,
        transport=transport,
    )
