"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.

Frames are captured at the texture size and shrunk to the tensor size
before they reach the classifier; small tensors keep the poll loop fast.
"""
import os
import cv2
import numpy as np
from pictionary.adapters.camera.base import CameraAdapter, TENSOR_DIMS

TEXTURE_DIMS = {"width": 1600, "height": 1200}

class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None

    def _open(self):
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if not self._cap.isOpened():
                self.status.log(f"cv2_camera: failed to open device {self._index}")
                return
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, TEXTURE_DIMS["width"])
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, TEXTURE_DIMS["height"])

    def request_permission(self) -> bool:
        # No OS prompt here: a device we can open is a granted one
        self._open()
        granted = self._cap is not None and self._cap.isOpened()
        self.status.log(f"cv2_camera: permissions status: {'granted' if granted else 'denied'}")
        return granted

    def next_frame(self) -> np.ndarray | None:
        self._open()
        if self._cap is None or not self._cap.isOpened():
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            return None
        frame = cv2.resize(frame, (TENSOR_DIMS["width"], TENSOR_DIMS["height"]), interpolation=cv2.INTER_AREA)
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def release(self):
        if self._cap and self._cap.isOpened():
            self._cap.release()
        self._cap = None


def encode_jpeg(frame: np.ndarray) -> bytes | None:
    """RGB frame -> JPEG bytes, for the capture view preview."""
    ok, buf = cv2.imencode(".jpg", cv2.cvtColor(frame, cv2.COLOR_RGB2BGR), [cv2.IMWRITE_JPEG_QUALITY, 85])
    if not ok:
        return None
    return bytes(buf)
