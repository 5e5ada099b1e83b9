"""
Classification poller: next frame -> classify (top-1) -> confident? -> stop.

One iteration per frame-clock tick (POLL_FPS, default 30), so the effective
classification rate is bounded by how fast the camera and the model answer,
not by a fixed timer. Camera reads and inference run in worker threads; all
session mutations happen back on the event loop.

Every start() opens a new generation. A classification that completes after
stop() (teardown, or a reset racing the loop) sees a stale generation and is
dropped without touching the session.
"""
import asyncio
import os
from typing import Callable
from pictionary.orchestrator.contracts import Phase, CONFIDENCE_THRESHOLD

class ClassificationPoller:
    def __init__(
        self,
        camera,
        classifier,
        session_store,
        on_confident: Callable[[str, int], None],
        threshold: float = CONFIDENCE_THRESHOLD,
        fps: float | None = None,
    ):
        self.camera = camera
        self.classifier = classifier
        self.status = session_store
        self.on_confident = on_confident
        self.threshold = threshold
        self.fps = fps if fps is not None else float(os.getenv("POLL_FPS", "30"))
        self._interval = 1.0 / self.fps if self.fps > 0 else 0.0
        self._task: asyncio.Task | None = None
        self._generation = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        if self._running:
            return False
        if self.status.phase is not Phase.CAPTURING:
            self.status.log(f"poller: not starting, phase={self.status.phase.value}")
            return False
        self._generation += 1
        self._running = True
        self._task = asyncio.create_task(self._loop(self._generation))
        self.status.log(f"poller: started (gen {self._generation}, {self.fps:g} fps)")
        return True

    def stop(self):
        if not self._running:
            return
        self._running = False
        self._generation += 1
        task, self._task = self._task, None
        # The loop stops itself on success; only cancel it from the outside
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
        self.status.log("poller: stopped")

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    async def _loop(self, generation: int):
        while self._is_current(generation):
            try:
                await self._tick(generation)
            except Exception as e:
                # A bad frame is just an inconclusive tick
                self.status.log(f"poller: tick error {type(e).__name__}: {e}")
            if not self._is_current(generation):
                break
            await asyncio.sleep(self._interval)

    async def _tick(self, generation: int):
        frame = await asyncio.to_thread(self.camera.next_frame)
        if frame is None or not self._is_current(generation):
            return
        self.status.last_frame = frame

        predictions = await asyncio.to_thread(self.classifier.classify, frame, 1)
        if not self._is_current(generation) or self.status.phase is not Phase.CAPTURING:
            return
        if not predictions:
            return

        top = predictions[0]
        self.status.last_prediction = top
        if top.confidence <= self.threshold:
            return

        self.status.log(f"poller: prediction {top.label} conf={top.confidence:.2f}")
        self.stop()
        cycle = self.status.record_label(top.label)
        if cycle is not None:
            self.on_confident(top.label, cycle)
