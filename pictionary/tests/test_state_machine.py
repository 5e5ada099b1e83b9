import asyncio

import httpx
import pytest

from pictionary.adapters.camera.mock_camera import MockCamera
from pictionary.adapters.classifier.mock_classifier import MockClassifier
from pictionary.adapters.translate.base import TranslateAdapter
from pictionary.adapters.translate.google_translate import GoogleTranslate
from pictionary.adapters.translate.mock_translate import MockTranslate
from pictionary.orchestrator.contracts import Phase, FALLBACK_TRANSLATION, TranslationOutcome
from pictionary.orchestrator.state_machine import Orchestrator


def google(status, handler):
    return GoogleTranslate(status, api_key="test-key", transport=httpx.MockTransport(handler))


def make_orch(status, translator, script=None, granted=True):
    camera = MockCamera(status, granted=granted, seed=0)
    classifier = MockClassifier(status, script=script if script is not None else [[("mug", 0.81)]])
    return Orchestrator(camera=camera, classifier=classifier, translator=translator, status_store=status, poll_fps=0)


async def test_mug_to_hebrew(status, eventually):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": {"translations": [{"translatedText": "ספל"}]}})

    orch = make_orch(status, google(status, handler))
    assert await orch.startup() is True

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.recognized_label == "mug"
    assert status.translated_text == "ספל"

    assert len(seen) == 1
    params = seen[0].url.params
    assert params["q"] == "mug"
    assert params["target"] == "he"
    assert params["source"] == "en"
    assert params["format"] == "html"
    assert params["model"] == "nmt"
    assert params["key"] == "test-key"
    await orch.shutdown()


async def test_http_error_shows_fallback(status, eventually):
    orch = make_orch(status, google(status, lambda request: httpx.Response(500, text="boom")))
    await orch.startup()

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.translated_text == FALLBACK_TRANSLATION
    assert status.recognized_label == "mug"
    await orch.shutdown()


async def test_transport_error_shows_fallback(status, eventually):
    def handler(request):
        raise httpx.ConnectError("network unreachable", request=request)

    orch = make_orch(status, google(status, handler))
    await orch.startup()

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.translated_text == FALLBACK_TRANSLATION
    await orch.shutdown()


async def test_translator_exception_never_strands_resolving(status, eventually):
    class Broken(TranslateAdapter):
        async def translate(self, text, target_language):
            raise RuntimeError("unexpected")

    orch = make_orch(status, Broken())
    await orch.startup()

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.translated_text == FALLBACK_TRANSLATION
    await orch.shutdown()


async def test_one_translation_per_cycle(status, eventually):
    translator = MockTranslate(status)
    orch = make_orch(status, translator)
    await orch.startup()

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    await asyncio.sleep(0.05)
    assert translator.requests == [("mug", "he")]
    await orch.shutdown()


async def test_reset_starts_a_new_cycle(status, eventually):
    translator = MockTranslate(status)
    orch = make_orch(status, translator, script=[[("mug", 0.81)], [], [("teapot", 0.7)]])
    await orch.startup()
    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)

    assert orch.reset() is True
    assert status.phase is Phase.CAPTURING
    assert status.recognized_label == ""
    assert status.translated_text == ""
    assert orch.poller.running

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.recognized_label == "teapot"
    assert translator.requests == [("mug", "he"), ("teapot", "he")]
    await orch.shutdown()


async def test_empty_classifications_never_resolve(status, eventually):
    translator = MockTranslate(status)
    classifier_script = [[]]
    orch = make_orch(status, translator, script=classifier_script)
    await orch.startup()

    await eventually(lambda: orch.classifier.calls >= 20)
    assert status.phase is Phase.CAPTURING
    assert translator.requests == []
    await orch.shutdown()


class Gated(TranslateAdapter):
    def __init__(self):
        self.gate = asyncio.Event()
        self.requests = []

    async def translate(self, text, target_language):
        self.requests.append((text, target_language))
        await self.gate.wait()
        return TranslationOutcome(ok=True, text=f"{text}@{target_language}")


async def test_language_change_does_not_affect_in_flight_cycle(status, eventually):
    translator = Gated()
    orch = make_orch(status, translator)
    await orch.startup()
    await eventually(lambda: translator.requests)

    assert status.phase is Phase.RESOLVING
    assert orch.set_target_language("zh") is True
    translator.gate.set()

    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    assert status.translated_text == "mug@he"
    assert status.target_language == "zh"
    await orch.shutdown()


async def test_reset_while_resolving_drops_stale_translation(status, eventually):
    translator = Gated()
    orch = make_orch(status, translator, script=[[("mug", 0.81)], []])
    await orch.startup()
    await eventually(lambda: translator.requests)

    orch.reset()
    translator.gate.set()
    await orch.wait_idle()

    assert status.phase is Phase.CAPTURING
    assert status.recognized_label == ""
    assert status.translated_text == ""
    await orch.shutdown()


async def test_permission_denied(status):
    orch = make_orch(status, MockTranslate(status), granted=False)

    assert await orch.startup() is False
    assert status.has_permission is False
    assert status.framework_ready is True
    assert not orch.poller.running
    assert orch.reset() is False
    assert not orch.poller.running
    await orch.shutdown()


async def test_shutdown_stops_polling_and_cancels_translation(status, eventually):
    translator = Gated()
    orch = make_orch(status, translator)
    await orch.startup()
    await eventually(lambda: translator.requests)

    await orch.shutdown()

    assert not orch.poller.running
    assert status.phase is Phase.CAPTURING
    assert status.recognized_label == ""
    assert status.translated_text == ""


async def test_restart_after_shutdown_mid_cycle_polls_again(status, eventually):
    translator = Gated()
    orch = make_orch(status, translator, script=[[("mug", 0.81)], []])
    await orch.startup()
    await eventually(lambda: translator.requests)
    await orch.shutdown()

    assert await orch.startup() is True
    assert orch.poller.running
    assert status.phase is Phase.CAPTURING
    await orch.shutdown()


async def test_restart_while_showing_result_keeps_result(status, eventually):
    orch = make_orch(status, MockTranslate(status))
    await orch.startup()
    await eventually(lambda: status.phase is Phase.SHOWING_RESULT)
    await orch.shutdown()

    assert await orch.startup() is True
    assert not orch.poller.running
    assert status.phase is Phase.SHOWING_RESULT
    assert "startup: ready, poller idle (phase=showing_result)" in status.logs
    await orch.shutdown()


async def test_model_load_failure_degrades_to_not_ready(status):
    class Unloadable(MockClassifier):
        def load(self):
            raise OSError("weights download failed")

    camera = MockCamera(status, seed=0)
    orch = Orchestrator(
        camera=camera, classifier=Unloadable(status), translator=MockTranslate(status), status_store=status, poll_fps=0,
    )

    assert await orch.startup() is False
    assert status.has_permission is True
    assert status.framework_ready is False
    assert not orch.poller.running
    assert "startup: model load failed OSError: weights download failed" in status.logs

    assert orch.reset() is False
    assert not orch.poller.running
    await orch.shutdown()
