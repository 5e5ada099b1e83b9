from abc import ABC, abstractmethod

import numpy as np

# Size of the frames handed to the classifier
TENSOR_DIMS = {"width": 152, "height": 200}

class CameraAdapter(ABC):
    def request_permission(self) -> bool:
        """Ask for access to the capture device. True when granted."""
        return True

    @abstractmethod
    def next_frame(self) -> np.ndarray | None:
        """Grab one frame as an HxWx3 RGB uint8 array, or None if none is ready."""
        ...

    def release(self):
        pass
