from pydantic import BaseModel
from typing import Literal, Optional

PhaseName = Literal["capturing", "resolving", "showing_result"]

class PredictionOut(BaseModel):
    label: str
    confidence: float

class LanguageOut(BaseModel):
    code: str
    label: str

class LanguagesResponse(BaseModel):
    languages: list[LanguageOut]
    default: str

class SetLanguageRequest(BaseModel):
    code: str

class SetLanguageResponse(BaseModel):
    ok: bool
    target_language: str
    error: Optional[str] = None

class StatusResponse(BaseModel):
    phase: PhaseName
    recognized_label: str = ""
    translated_text: str = ""
    translation_available: bool = False   # phase == showing_result, UI swaps camera for result
    target_language: str
    target_language_label: str
    has_permission: Optional[bool] = None
    framework_ready: bool = False
    poller_running: bool = False
    last_prediction: Optional[PredictionOut] = None
    logs: list[str]

class ResetResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    status: StatusResponse
