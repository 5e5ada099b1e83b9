class ClassifierAdapter:
    ready: bool = False

    def load(self):
        """Bring the inference runtime up and load weights. Blocking; call once."""
        self.ready = True

    def classify(self, frame, top_k: int = 1):
        """Return list[Prediction] for an HxWx3 RGB frame, highest confidence first."""
        raise NotImplementedError
