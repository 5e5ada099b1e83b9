import asyncio
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from dotenv import load_dotenv
from pictionary.services.models import (
    StatusResponse, PredictionOut, ResetResponse,
    LanguagesResponse, LanguageOut, SetLanguageRequest, SetLanguageResponse,
)
from pictionary.services.session_store import SessionStore
from pictionary.orchestrator.contracts import LANGUAGES, DEFAULT_LANGUAGE, Phase
from pictionary.orchestrator.state_machine import Orchestrator
from pictionary.orchestrator import errors

load_dotenv(dotenv_path="pictionary/.env", override=False)

status = SessionStore()
if not status.set_target_language(os.getenv("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)):
    status.target_language = DEFAULT_LANGUAGE

# Camera: CAMERA_ADAPTER=cv2|mock (default cv2, mock when opencv is not installed)
_camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if _camera_adapter == "cv2":
    try:
        from pictionary.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status)
    except ImportError:
        from pictionary.adapters.camera.mock_camera import MockCamera
        camera = MockCamera(status)
        status.log("camera: opencv not installed, using MockCamera")
else:
    from pictionary.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
status.log(f"camera adapter: {type(camera).__name__}")

# Classifier: CLASSIFIER_ADAPTER=mobilenet|mock (default mobilenet)
_classifier_adapter = os.getenv("CLASSIFIER_ADAPTER", "mobilenet").lower()
if _classifier_adapter == "mobilenet":
    try:
        from pictionary.adapters.classifier.mobilenet_classifier import MobileNetClassifier
        classifier = MobileNetClassifier(status)
    except ImportError:
        from pictionary.adapters.classifier.mock_classifier import MockClassifier
        classifier = MockClassifier(status)
        status.log("classifier: torch/torchvision not installed, using MockClassifier")
else:
    from pictionary.adapters.classifier.mock_classifier import MockClassifier
    classifier = MockClassifier(status)
status.log(f"classifier adapter: {type(classifier).__name__}")

# Translator: TRANSLATOR_ADAPTER=google|mock (default google, mock without an API key)
_translator_adapter = os.getenv("TRANSLATOR_ADAPTER", "google").lower()
if _translator_adapter == "google":
    from pictionary.adapters.translate.google_translate import GoogleTranslate
    translator = GoogleTranslate(status)
    if not translator._ready:
        status.log("translator: GoogleTranslate not ready, falling back to MockTranslate")
        from pictionary.adapters.translate.mock_translate import MockTranslate
        translator = MockTranslate(status)
else:
    from pictionary.adapters.translate.mock_translate import MockTranslate
    translator = MockTranslate(status)
status.log(f"translator adapter: {type(translator).__name__}")

orch = Orchestrator(camera=camera, classifier=classifier, translator=translator, status_store=status)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await orch.startup()
    try:
        yield
    finally:
        # No poll tick may fire into a torn-down app
        await orch.shutdown()


app = FastAPI(title="pictionary", lifespan=lifespan)


def _status_response() -> StatusResponse:
    pred = status.last_prediction
    return StatusResponse(
        phase=status.phase.value,
        recognized_label=status.recognized_label,
        translated_text=status.translated_text,
        translation_available=status.phase is Phase.SHOWING_RESULT,
        target_language=status.target_language,
        target_language_label=status.target_language_label,
        has_permission=status.has_permission,
        framework_ready=status.framework_ready,
        poller_running=orch.poller.running,
        last_prediction=PredictionOut(label=pred.label, confidence=pred.confidence) if pred else None,
        logs=status.logs,
    )


@app.get("/status", response_model=StatusResponse)
async def get_status():
    return _status_response()


@app.post("/reset", response_model=ResetResponse)
async def reset():
    """'Check new word': clear label and translation, resume polling the camera."""
    ok = orch.reset()
    if ok:
        return ResetResponse(ok=True, status=_status_response())
    error = errors.ERR_PERMISSION_DENIED if status.has_permission is False else errors.ERR_NOT_READY
    return ResetResponse(ok=False, error=error, status=_status_response())


@app.get("/languages", response_model=LanguagesResponse)
async def languages():
    return LanguagesResponse(
        languages=[LanguageOut(code=code, label=label) for code, label in LANGUAGES.items()],
        default=DEFAULT_LANGUAGE,
    )


@app.post("/language", response_model=SetLanguageResponse)
async def set_language(req: SetLanguageRequest):
    """Applies to the next translation; a cycle already resolving keeps its language."""
    if not orch.set_target_language(req.code):
        return SetLanguageResponse(ok=False, target_language=status.target_language, error=errors.ERR_UNSUPPORTED_LANGUAGE)
    return SetLanguageResponse(ok=True, target_language=status.target_language)


@app.get("/frame")
async def frame():
    """Latest polled frame as JPEG (the live preview). 204 until a frame was seen."""
    img = status.last_frame
    if img is None:
        return Response(status_code=204)
    try:
        from pictionary.adapters.camera.cv2_camera import encode_jpeg
    except ImportError:
        return Response(status_code=204)
    jpeg = await asyncio.to_thread(encode_jpeg, img)
    if jpeg is None:
        return Response(status_code=204)
    return Response(content=jpeg, media_type="image/jpeg", headers={"Cache-Control": "no-store"})


@app.get("/health")
async def health():
    checks = {
        "api": True,
        "camera_adapter": type(camera).__name__,
        "classifier_adapter": type(classifier).__name__,
        "translator_adapter": type(translator).__name__,
        "has_permission": status.has_permission,
        "framework_ready": status.framework_ready,
        "poller_running": orch.poller.running,
    }
    checks["all_ok"] = bool(status.has_permission) and status.framework_ready
    return checks
