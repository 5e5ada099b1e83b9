from dataclasses import dataclass
from enum import Enum
from typing import Optional

class Phase(str, Enum):
    CAPTURING = "capturing"
    RESOLVING = "resolving"
    SHOWING_RESULT = "showing_result"

# Codes from https://cloud.google.com/translate/docs/languages
LANGUAGES: dict[str, str] = {
    "he": "Hebrew",
    "ar": "Arabic",
    "zh": "Mandarin Chinese",
}
DEFAULT_LANGUAGE = "he"

# Only attempt translation when the top prediction is above this
CONFIDENCE_THRESHOLD = 0.3

FALLBACK_TRANSLATION = "Cannot get translation at this time. Please try again later"

@dataclass
class Prediction:
    label: str                 # e.g. "coffee mug"
    confidence: float          # 0..1

@dataclass
class TranslationOutcome:
    ok: bool
    text: str
    error_code: Optional[str] = None

    @classmethod
    def failed(cls, error_code: str) -> "TranslationOutcome":
        return cls(ok=False, text=FALLBACK_TRANSLATION, error_code=error_code)
