class TranslateAdapter:
    async def translate(self, text: str, target_language: str):
        """Return a TranslationOutcome. Failures come back as a fallback outcome, never raised."""
        raise NotImplementedError

    async def aclose(self):
        pass
