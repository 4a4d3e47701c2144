"""
Pydantic models for the course-creation pipeline.

Request payloads, structured LLM outputs and step results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from studyhub.events import ItemError

TeachingStyle = Literal["general", "feynman", "mankiw", "krugman", "liskov", "knuth"]
Difficulty = Literal["Beginner", "Intermediate", "Advanced"]
ModuleFormat = Literal["TEXT", "VIDEO", "MD", "QUIZ"]


class NoteUpload(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    content_type: str = "text/plain"
    text: str = Field(..., min_length=1, description="Extracted note text")


class CreateCourseRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    current_level: str | None = Field(default=None, max_length=120)
    outcome: str | None = Field(default=None, max_length=500)
    teaching_style: TeachingStyle = "general"
    notes: list[NoteUpload] = Field(default_factory=list, max_length=20)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Course name must have at least 3 characters")
        return v


class Subtopic(BaseModel):
    title: str
    description: str
    prerequisites: list[str] = Field(default_factory=list)
    difficulty: Difficulty = "Beginner"
    format: ModuleFormat = "TEXT"

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v):
        return v.strip().capitalize() if isinstance(v, str) else v

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class CourseOutline(BaseModel):
    name: str
    subtopics: list[Subtopic] = Field(default_factory=list)


@dataclass
class UploadNotesResult:
    """Stored attachments plus the notes whose embedding failed."""

    attachments: list[dict[str, Any]] = field(default_factory=list)
    embedding_errors: list[ItemError] = field(default_factory=list)
