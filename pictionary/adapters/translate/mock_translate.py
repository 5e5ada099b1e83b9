from pictionary.adapters.translate.base import TranslateAdapter
from pictionary.orchestrator.contracts import TranslationOutcome
from pictionary.orchestrator import errors

class MockTranslate(TranslateAdapter):
    def __init__(self, status_store, fail: bool = False):
        self.status = status_store
        self.fail = fail
        self.requests: list[tuple[str, str]] = []

    async def translate(self, text: str, target_language: str) -> TranslationOutcome:
        self.requests.append((text, target_language))
        if self.fail:
            self.status.log(f"mock_translate: simulated failure for '{text}'")
            return TranslationOutcome.failed(errors.ERR_TRANSPORT)
        translated = f"{text} [{target_language}]"
        self.status.log(f"mock_translate: '{text}' -> '{translated}'")
        return TranslationOutcome(ok=True, text=translated)
