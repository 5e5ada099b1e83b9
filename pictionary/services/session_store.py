from dataclasses import dataclass, field
from typing import Optional, List
import numpy as np
from pictionary.orchestrator.contracts import Phase, Prediction, LANGUAGES, DEFAULT_LANGUAGE

@dataclass
class SessionStore:
    """Single source of truth for the capture/translate cycle.

    Only touched from the event loop thread, so no locking. Deferred
    completions go through record_label / show_result, which check the
    phase and refuse to resurrect a cycle that was reset in the meantime.
    """
    phase: Phase = Phase.CAPTURING
    recognized_label: str = ""
    translated_text: str = ""
    target_language: str = DEFAULT_LANGUAGE
    has_permission: Optional[bool] = None     # None until the camera was asked
    framework_ready: bool = False             # model loaded
    last_prediction: Optional[Prediction] = None
    last_frame: Optional[np.ndarray] = field(default=None, repr=False, compare=False)   # preview only
    cycle: int = 0                            # bumped at every confident label
    logs: List[str] = field(default_factory=list)

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]

    def reset(self):
        self.recognized_label = ""
        self.translated_text = ""
        self.last_prediction = None
        self.phase = Phase.CAPTURING
        self.log("session: reset -> capturing")

    def set_target_language(self, code: str) -> bool:
        if code not in LANGUAGES:
            self.log(f"session: unsupported language '{code}'")
            return False
        self.target_language = code
        self.log(f"session: target language -> {code} ({LANGUAGES[code]})")
        return True

    def record_label(self, label: str) -> Optional[int]:
        """Capturing -> Resolving. Returns the new cycle id, or None if not capturing."""
        if self.phase is not Phase.CAPTURING:
            return None
        self.cycle += 1
        self.recognized_label = label
        self.translated_text = ""
        self.phase = Phase.RESOLVING
        self.log(f"session: label='{label}' -> resolving (cycle {self.cycle})")
        return self.cycle

    def show_result(self, cycle: int, text: str) -> bool:
        """Resolving -> ShowingResult, only for the cycle that is still resolving."""
        if self.phase is not Phase.RESOLVING or cycle != self.cycle:
            self.log(f"session: stale translation for cycle {cycle} dropped")
            return False
        self.translated_text = text
        self.phase = Phase.SHOWING_RESULT
        self.log(f"session: '{self.recognized_label}' -> '{text}' showing result")
        return True

    @property
    def target_language_label(self) -> str:
        return LANGUAGES.get(self.target_language, self.target_language)
