import asyncio
import time
from pictionary.orchestrator.contracts import Phase, TranslationOutcome
from pictionary.orchestrator.poller import ClassificationPoller
from pictionary.orchestrator import errors

class Orchestrator:
    """Wires camera, classifier and translator around one SessionStore.

    capturing --(confident label)--> resolving --(translation or fallback)-->
    showing_result --(reset)--> capturing
    """

    def __init__(self, camera, classifier, translator, status_store, poll_fps: float | None = None):
        self.camera = camera
        self.classifier = classifier
        self.translator = translator
        self.status = status_store
        self.poller = ClassificationPoller(
            camera, classifier, status_store, on_confident=self._on_confident, fps=poll_fps,
        )
        self._pending: set[asyncio.Task] = set()

    async def startup(self) -> bool:
        """
        1. ask for camera permission
        2. bring up the inference runtime and load the model
        3. enter capturing and start polling
        Returns False when the capture view cannot be shown (permission denied
        or the model failed to load).
        """
        t0 = time.time()
        granted = await asyncio.to_thread(self.camera.request_permission)
        self.status.has_permission = granted
        self.status.log(f"startup: permissions status: {'granted' if granted else 'denied'}")

        # Model has to be ready before the first classify()
        self.status.log(f"startup: loading {type(self.classifier).__name__}")
        try:
            await asyncio.to_thread(self.classifier.load)
        except Exception as e:
            # Keep serving: /health shows not ready, /reset answers NOT_READY
            self.status.framework_ready = False
            self.status.log(f"startup: model load failed {type(e).__name__}: {e}")
            return False
        self.status.framework_ready = True

        if not granted:
            self.status.log(f"startup: {errors.ERR_PERMISSION_DENIED}, capture view unavailable")
            return False

        if not self.poller.start() and not self.poller.running:
            self.status.log(f"startup: ready, poller idle (phase={self.status.phase.value})")
            return True
        self.status.log(f"startup: ready in {int((time.time() - t0) * 1000)}ms")
        return True

    def can_capture(self) -> bool:
        return bool(self.status.has_permission) and self.status.framework_ready

    def _on_confident(self, label: str, cycle: int):
        # Target language is fixed at the moment translation is requested
        target = self.status.target_language
        task = asyncio.create_task(self._resolve(label, target, cycle))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _resolve(self, label: str, target: str, cycle: int) -> TranslationOutcome:
        self.status.log(f"resolve: '{label}' -> {target}")
        try:
            outcome = await self.translator.translate(label, target)
        except Exception as e:
            # Adapters return fallback outcomes; anything escaping still must not strand the cycle
            self.status.log(f"resolve: translator error {type(e).__name__}: {e}")
            outcome = TranslationOutcome.failed(errors.ERR_TRANSPORT)
        if not outcome.ok:
            self.status.log(f"resolve: fallback text ({outcome.error_code})")
        self.status.show_result(cycle, outcome.text)
        return outcome

    def reset(self) -> bool:
        """'Check new word': back to capturing and poll again."""
        self.status.reset()
        if not self.can_capture():
            self.status.log(f"reset: {errors.ERR_NOT_READY}, poller not started")
            return False
        self.poller.start()
        return True

    def set_target_language(self, code: str) -> bool:
        return self.status.set_target_language(code)

    async def wait_idle(self):
        """Wait until no translation is in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def shutdown(self):
        self.poller.stop()
        for task in list(self._pending):
            task.cancel()
        await asyncio.gather(*list(self._pending), return_exceptions=True)
        if self.status.phase is Phase.RESOLVING:
            # The cancelled translation would strand the cycle; start over next time
            self.status.log("shutdown: translation cancelled while resolving")
            self.status.reset()
        await asyncio.to_thread(self.camera.release)
        await self.translator.aclose()
        self.status.log("shutdown: done")
