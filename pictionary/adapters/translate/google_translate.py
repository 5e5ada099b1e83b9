"""
Google Cloud Translation (Basic, v2) client.
https://cloud.google.com/translate/docs/basic/quickstart

Uses the simple GET-with-key model. The key travels in the query string and
is visible to anyone who can see the traffic; a POST with an OAuth token
avoids that but needs a service account. Requires GOOGLE_API_KEY.

Response shape on success:
    {"data": {"translations": [{"translatedText": "..."}]}}
Only the first translation is used.
"""
import html
import os
import httpx
from pictionary.adapters.translate.base import TranslateAdapter
from pictionary.orchestrator.contracts import TranslationOutcome
from pictionary.orchestrator import errors

GOOGLE_TRANSLATE_API = "https://translation.googleapis.com/language/translate/v2"


class GoogleTranslate(TranslateAdapter):
    def __init__(
        self,
        status_store,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.status = status_store
        self._api_key = api_key if api_key is not None else os.getenv("GOOGLE_API_KEY", "")
        self.base_url = base_url or os.getenv("TRANSLATE_API_URL", GOOGLE_TRANSLATE_API)
        self.timeout = timeout if timeout is not None else float(os.getenv("TRANSLATE_TIMEOUT", "15"))
        self._transport = transport
        # Opened on the first request, so a key-less instance holds no connections
        self._client: httpx.AsyncClient | None = None
        self._ready = bool(self._api_key)
        if not self._ready:
            self.status.log("google_translate: GOOGLE_API_KEY not set")

    async def translate(self, text: str, target_language: str) -> TranslationOutcome:
        params = {
            "q": text,
            "target": target_language,
            "format": "html",
            "source": "en",
            "model": "nmt",
            "key": self._api_key,
        }
        self.status.log(f"google_translate: GET {self.base_url} q='{text}' target={target_language}")

        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        try:
            resp = await self._client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            self.status.log(f"google_translate: transport error {type(e).__name__}: {e}")
            return TranslationOutcome.failed(errors.ERR_TRANSPORT)

        if not resp.is_success:
            self.status.log(f"google_translate: HTTP {resp.status_code}: {resp.text[:300]}")
            return TranslationOutcome.failed(errors.ERR_HTTP_STATUS)
        if not resp.content:
            self.status.log("google_translate: empty response body")
            return TranslationOutcome.failed(errors.ERR_EMPTY_RESPONSE)

        try:
            data = resp.json()
        except ValueError:
            self.status.log(f"google_translate: undecodable response '{resp.text[:300]}'")
            return TranslationOutcome.failed(errors.ERR_BAD_RESPONSE)

        translated = self._parse_translation(data)
        if translated is None:
            self.status.log(f"google_translate: unexpected response {str(data)[:300]}")
            return TranslationOutcome.failed(errors.ERR_BAD_RESPONSE)

        self.status.log(f"google_translate: translated text is '{translated}'")
        return TranslationOutcome(ok=True, text=translated)

    def _parse_translation(self, data) -> str | None:
        try:
            translated = data["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError):
            return None
        if not isinstance(translated, str) or not translated.strip():
            return None
        # format=html means entities come back escaped (&#39; and friends)
        return html.unescape(translated)

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
