"""
Pydantic schemas for submissions and stored records.

Submitted fields are only checked for presence: anything missing is stored
as ``None`` rather than rejected.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class QuerySubmission(BaseModel):
    name: Any = None
    email: Any = None
    query: Any = None


class QuestionSubmission(BaseModel):
    question: Any = None


class AnswerSubmission(BaseModel):
    answer: Any = None


class EmailSubmission(BaseModel):
    email: Any = None


class QuestionRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    questionid: str
    question: Any = None


class AnswerRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    answerid: str
    answer: Any = None


class HealthResponse(BaseModel):
    status: str
