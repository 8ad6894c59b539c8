from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class StartInterviewRequest(BaseModel):
    session_id: Optional[str] = Field(default=None, max_length=128)
    locale: Optional[str] = Field(default=None, max_length=35)
    demo: bool = False


class AnswerRequest(BaseModel):
    text: str = Field(default="", max_length=2000)


class InterviewStatusResponse(BaseModel):
    session_id: str
    status: str
    progress: float
    current_step: int
    total_steps: int
    elapsed_seconds: int
    transcript: str
    responses: Dict[str, Any] = {}
    current_question: Optional[str] = None
    current_field: Optional[str] = None
    summary: Optional[str] = None
    conducted: bool = False


class PromptResponse(BaseModel):
    text: str
    kind: str
    created_at: datetime
    audio: Optional[str] = None


class PromptListResponse(BaseModel):
    session_id: str
    prompts: List[PromptResponse] = []


class NormalizeRequest(BaseModel):
    text: str = Field(max_length=500)
    locale: str = Field(default="en", max_length=35)


class NormalizeResponse(BaseModel):
    original: str
    normalized: str
    locale: str
    is_valid: bool
    confidence: float
    rounds: int = 0
    steps: List[str] = []

