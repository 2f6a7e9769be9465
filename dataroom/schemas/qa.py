from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from dataroom.models.qa import QAStatus


class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=10, max_length=5000)
    category: str = Field("General", max_length=100)
    is_urgent: bool = False


class AnswerCreate(BaseModel):
    answer_text: str = Field(..., min_length=5, max_length=10000)
    is_public: bool = True


class QAThreadResponse(BaseModel):
    id: str
    question_text: str
    category: str
    asked_by: str
    asked_by_email: Optional[str] = None
    asked_at: datetime
    answer_text: Optional[str] = None
    answered_by: Optional[str] = None
    answered_at: Optional[datetime] = None
    is_public: bool
    is_urgent: bool
    status: QAStatus

    class Config:
        from_attributes = True


class QuestionSubmitted(BaseModel):
    id: str
    message: str = "Question submitted successfully"
