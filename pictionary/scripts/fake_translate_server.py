"""
Fake Google Translate v2 endpoint for running the app without an API key.

Answers GET /language/translate/v2 with the Google response shape, using a
tiny dictionary and falling back to "<text> (<target>)". q=fail returns 500
so the fallback path can be exercised end to end.

Usage:
    python pictionary/scripts/fake_translate_server.py    (terminal 1)
    GOOGLE_API_KEY=dev TRANSLATE_API_URL=http://127.0.0.1:9100/language/translate/v2 \
        uvicorn pictionary.web.app:app                     (terminal 2)
"""

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-translate-server")

_DICTIONARY = {
    ("coffee mug", "he"): "ספל קפה",
    ("coffee mug", "ar"): "كوب قهوة",
    ("coffee mug", "zh"): "咖啡杯",
    ("banana", "he"): "בננה",
    ("banana", "ar"): "موز",
    ("banana", "zh"): "香蕉",
}


@app.get("/language/translate/v2")
async def translate(q: str, target: str, source: str = "en", format: str = "html", model: str = "nmt", key: str = ""):
    print(f"[translate] q={q!r} {source}->{target} format={format} model={model}")
    if not key:
        return JSONResponse(status_code=403, content={"error": {"code": 403, "message": "API key missing"}})
    if q == "fail":
        return JSONResponse(status_code=500, content={"error": {"code": 500, "message": "simulated failure"}})
    text = _DICTIONARY.get((q.lower(), target), f"{q} ({target})")
    return {"data": {"translations": [{"translatedText": text}]}}


if __name__ == "__main__":
    print("Fake translate server starting on http://localhost:9100")
    uvicorn.run(app, host="0.0.0.0", port=9100)
