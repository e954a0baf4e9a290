from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

class HistoryTurn(BaseModel):
    role: str = "user"  # "user" | "assistant"
    text: str = ""
    intent: Optional[str] = None
    sources: Optional[List[str]] = None

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    report_id: Optional[str] = Field(default=None, alias="reportId")
    message: Optional[str] = None
    history: List[HistoryTurn] = []

class ChatResponse(BaseModel):
    success: bool = True
    reply: str
    intent: str
    sources: List[str]

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
