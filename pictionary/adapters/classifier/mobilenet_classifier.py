"""
ImageNet-pretrained MobileNet classifier (torchvision).

MOBILENET_VERSION selects the backbone: v2 (default), v3_large or v3_small.
Smaller backbones trade accuracy for speed; v3_small keeps up with the poll
loop on CPU, v2 is the better default when a GPU is around.

classify() returns the top-k ImageNet labels with softmax probabilities, e.g.
    [Prediction(label="joystick", confidence=0.807)]
"""
import os
import time
import numpy as np
import torch
from torchvision import models
from pictionary.adapters.classifier.base import ClassifierAdapter
from pictionary.orchestrator.contracts import Prediction

_BACKBONES = {
    "v2": (models.mobilenet_v2, models.MobileNet_V2_Weights.DEFAULT),
    "v3_large": (models.mobilenet_v3_large, models.MobileNet_V3_Large_Weights.DEFAULT),
    "v3_small": (models.mobilenet_v3_small, models.MobileNet_V3_Small_Weights.DEFAULT),
}


class MobileNetClassifier(ClassifierAdapter):
    def __init__(self, status_store, version: str | None = None):
        self.status = status_store
        self.version = (version or os.getenv("MOBILENET_VERSION", "v2")).lower()
        if self.version not in _BACKBONES:
            self.status.log(f"mobilenet: unknown version '{self.version}', using v2")
            self.version = "v2"
        self.device = "cuda" if torch.cuda.is_available() else "cpu"
        self.ready = False
        self._model = None
        self._preprocess = None
        self._categories: list[str] = []

    def load(self):
        if self.ready:
            return
        builder, weights = _BACKBONES[self.version]
        self.status.log(f"mobilenet: loading {self.version} on {self.device}...")
        t0 = time.time()
        model = builder(weights=weights)
        model.eval()
        self._model = model.to(self.device)
        # Resize + center crop + normalize, matching how the weights were trained
        self._preprocess = weights.transforms()
        self._categories = weights.meta["categories"]
        self.ready = True
        self.status.log(f"mobilenet: ready in {time.time() - t0:.2f}s ({len(self._categories)} classes)")

    def classify(self, frame: np.ndarray, top_k: int = 1) -> list[Prediction]:
        if not self.ready:
            raise RuntimeError("mobilenet: classify() before load()")
        # HxWxC uint8 -> CxHxW, the layout torchvision transforms expect
        tensor = torch.from_numpy(np.ascontiguousarray(frame)).permute(2, 0, 1)
        with torch.inference_mode():
            batch = self._preprocess(tensor).unsqueeze(0).to(self.device)
            probs = self._model(batch).softmax(dim=1)[0]
            scores, indices = probs.topk(min(top_k, probs.numel()))
        return [
            Prediction(label=self._categories[i], confidence=float(s))
            for s, i in zip(scores.tolist(), indices.tolist())
        ]
