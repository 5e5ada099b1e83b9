import random
from pictionary.adapters.classifier.base import ClassifierAdapter
from pictionary.orchestrator.contracts import Prediction

LABELS = ["coffee mug", "banana", "joystick", "teapot", "remote control"]

class MockClassifier(ClassifierAdapter):
    def __init__(self, status_store, script: list | None = None):
        self.status = status_store
        # Each script entry is one classify() result: a list of (label, confidence).
        # The last entry repeats once the script runs out.
        self._script = list(script) if script is not None else None
        self.calls = 0

    def classify(self, frame, top_k: int = 1) -> list[Prediction]:
        self.calls += 1
        if self._script is None:
            label = random.choice(LABELS)
            return [Prediction(label=label, confidence=0.9)]
        entry = self._script.pop(0) if len(self._script) > 1 else (self._script[0] if self._script else [])
        return [Prediction(label=l, confidence=c) for l, c in entry][:top_k]
