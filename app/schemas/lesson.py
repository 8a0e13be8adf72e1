"""
Pydantic schemas for lessons: the lesson document tree and the request bodies
of the lesson endpoints.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LessonMode(str, Enum):
    """How a lesson teaches its topic."""

    FEYNMAN = "FEYNMAN"
    INTERVIEW = "INTERVIEW"


class LessonStatus(str, Enum):
    """Progress status of a lesson for one user."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class StepType(str, Enum):
    CONCEPT = "CONCEPT"
    ANALOGY = "ANALOGY"
    QUIZ = "QUIZ"
    SUMMARY = "SUMMARY"
    FLASHCARD = "FLASHCARD"
    ROLEPLAY = "ROLEPLAY"


VisualType = Literal["SLIDE", "DIAGRAM", "ANIMATION", "MATH_PLOT"]
VisualStatus = Literal["GENERATING", "READY", "ERROR", "DEPRECATED"]


# ============= Lesson document =============

class VisualAsset(BaseModel):
    """Visual content of a step: markdown, mermaid code or animation JSON."""
    model_config = ConfigDict(extra="allow")

    id: str
    node_id: str = ""
    visual_type: VisualType = "SLIDE"
    title: str = ""
    content: str = ""
    image_url: Optional[str] = None
    config_json: Optional[Any] = None
    generator_version: str = ""
    status: VisualStatus = "READY"


class InteractiveTemplateData(BaseModel):
    """Quiz widget configuration (T1_DragSort, T3_FillBlank, ...)."""
    model_config = ConfigDict(extra="allow")

    template_id: Optional[str] = None
    data: Optional[Any] = None
    hint: Optional[str] = None
    type: Optional[str] = None
    question: Optional[str] = None


class Flashcard(BaseModel):
    front: str
    back: str


class LessonStep(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: StepType
    title: str
    content: VisualAsset
    quizConfig: Optional[InteractiveTemplateData] = None
    flashcard: Optional[Flashcard] = None


class LessonChapter(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    steps: List[LessonStep] = Field(default_factory=list)


class LessonPlan(BaseModel):
    """A complete lesson document as produced by a generator."""
    model_config = ConfigDict(extra="allow")

    id: str
    topic: str
    mode: LessonMode
    chapters: List[LessonChapter] = Field(default_factory=list)
    createdAt: int


class ContentRequest(BaseModel):
    """Input of a generator."""

    query: str
    mode: LessonMode = LessonMode.FEYNMAN
    document_content: Optional[str] = None
    timestamp: Optional[int] = None


# ============= Request / response bodies =============

class LessonSave(BaseModel):
    """Body of POST /lessons."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, max_length=255)
    topic: str = Field(..., max_length=512)
    mode: LessonMode
    content: Any = Field(..., description="Serialized lesson document, or the document itself")
    created_at: Optional[int] = Field(None, alias="createdAt", description="Epoch milliseconds")
    user_id: Optional[int] = Field(None, alias="userId")


class LessonGenerate(BaseModel):
    """Body of POST /lessons/generate."""
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1)
    mode: LessonMode = LessonMode.FEYNMAN
    user_id: Optional[int] = Field(None, alias="userId")
    document_content: Optional[str] = Field(None, alias="documentContent")


class GeneratedLesson(BaseModel):
    """Lesson returned by POST /lessons/generate and where it came from."""

    source: Literal["cache", "generated", "mock"]
    lesson: Dict[str, Any]


class VisualGenerate(BaseModel):
    """Body of POST /content/generate."""

    query: str = Field(..., min_length=1)
    mode: LessonMode = LessonMode.FEYNMAN
