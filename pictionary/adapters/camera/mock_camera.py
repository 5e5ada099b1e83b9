"""Mock camera: serves synthetic RGB frames for testing without a webcam."""
import numpy as np
from pictionary.adapters.camera.base import CameraAdapter, TENSOR_DIMS

class MockCamera(CameraAdapter):
    def __init__(self, status_store, granted: bool = True, frames: list | None = None, seed: int | None = None):
        self.status = status_store
        self.granted = granted
        # Scripted frames are served in order (None = no frame that tick), then noise
        self._frames = list(frames) if frames is not None else []
        self._rng = np.random.default_rng(seed)
        self.served = 0

    def request_permission(self) -> bool:
        self.status.log(f"mock_camera: permissions status: {'granted' if self.granted else 'denied'}")
        return self.granted

    def next_frame(self) -> np.ndarray | None:
        self.served += 1
        if self._frames:
            return self._frames.pop(0)
        shape = (TENSOR_DIMS["height"], TENSOR_DIMS["width"], 3)
        return self._rng.integers(0, 256, size=shape, dtype=np.uint8)
