"""
Lesson generator backed by a remote LLM (DeepSeek or any OpenAI-compatible API).
"""
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from app.core.agents.lesson.prompts import (
    LESSON_CONTEXT_TEMPLATE,
    LESSON_GENERATION_SYSTEM_PROMPT,
    LESSON_GENERATION_USER_PROMPT,
    VISUAL_GENERATION_SYSTEM_PROMPT,
    VISUAL_GENERATION_USER_PROMPT,
)
from app.core.config import Settings
from app.core.exceptions import GenerationError, GeneratorUnavailable
from app.core.llm_config import LLMFactory
from app.schemas.lesson import ContentRequest, LessonPlan, VisualAsset
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)

GENERATOR_VERSION = "deepseek-v1"
VISUAL_GENERATOR_VERSION = "v2.2-deepseek"
IMAGE_SEARCH_URL = "https://source.unsplash.com/1600x900/?{keyword}"


class LessonGenerator:
    """
    Generates lesson plans and single visual assets with an LLM.

    The model is asked for a fixed JSON shape; the reply is parsed, missing
    ids are filled in and the result is validated as a ``LessonPlan``.
    """

    def __init__(self, settings: Settings, llm: Optional[BaseChatModel] = None):
        self.settings = settings
        self._llm = llm

    @property
    def configured(self) -> bool:
        return self._llm is not None or self.settings.llm_configured

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = LLMFactory.create_llm(
                model=self.settings.LLM_MODEL,
                base_url=self.settings.LLM_BASE_URL,
                temperature=self.settings.LLM_TEMPERATURE,
                max_tokens=self.settings.LLM_MAX_TOKENS,
                json_mode=True,
                tracing_project="lesson-generation",
                api_key=self.settings.DEEPSEEK_API_KEY,
            )
        return self._llm

    def generate_lesson(self, request: ContentRequest) -> LessonPlan:
        """
        Generate a lesson plan for a topic.

        Args:
            request: Topic, mode and optional context document

        Returns:
            Lesson plan with ids, asset metadata and timestamps filled in

        Raises:
            GeneratorUnavailable: If no API key is configured
            GenerationError: If the call fails or the reply is unusable
        """
        self._ensure_configured()

        context = (
            LESSON_CONTEXT_TEMPLATE.format(document=request.document_content)
            if request.document_content
            else ""
        )
        user_prompt = LESSON_GENERATION_USER_PROMPT.format(
            topic=request.query,
            mode=request.mode.value,
            context=context,
        )

        logger.info(f"Generating {request.mode.value} lesson for '{request.query}'")
        data = self._invoke(LESSON_GENERATION_SYSTEM_PROMPT, user_prompt)
        lesson = self._build_lesson(data, request)

        logger.info(f"Generated lesson {lesson.id} with {len(lesson.chapters)} chapters")
        return lesson

    def generate_visual(self, request: ContentRequest) -> VisualAsset:
        """
        Generate a single visual asset for a query.

        Raises:
            GeneratorUnavailable: If no API key is configured
            GenerationError: If the call fails or the reply is unusable
        """
        self._ensure_configured()

        data = self._invoke(
            VISUAL_GENERATION_SYSTEM_PROMPT,
            VISUAL_GENERATION_USER_PROMPT.format(query=request.query),
        )

        stamp = now_ms()
        image_keyword = data.get("image_url")
        try:
            return VisualAsset(
                id=f"gen-{stamp}",
                node_id=f"topic-{stamp}",
                visual_type=data.get("visual_type", "SLIDE"),
                title=data.get("title", request.query),
                content=_as_text(data.get("content", "")),
                image_url=IMAGE_SEARCH_URL.format(keyword=quote(image_keyword)) if image_keyword else None,
                config_json=data.get("config_json"),
                generator_version=VISUAL_GENERATOR_VERSION,
                status="READY",
            )
        except ValidationError as e:
            logger.error(f"Visual asset failed validation: {e}")
            raise GenerationError("Invalid JSON response from AI", str(e)) from e

    def _ensure_configured(self) -> None:
        if not self.configured:
            logger.warning("DeepSeek API key is missing or placeholder, remote generation unavailable")
            raise GeneratorUnavailable()

    def _invoke(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """Call the model and parse its reply as a JSON object."""
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            logger.error(f"DeepSeek API error: {e}")
            raise GenerationError("DeepSeek API Error", str(e)) from e

        return self._parse_response(str(response.content))

    def _parse_response(self, response_text: str) -> Dict[str, Any]:
        """Parse LLM response."""
        # Extract JSON
        if "```json" in response_text:
            start = response_text.find("```json") + 7
            end = response_text.find("```", start)
            response_text = response_text[start:end].strip()
        elif "```" in response_text:
            start = response_text.find("```") + 3
            end = response_text.find("```", start)
            response_text = response_text[start:end].strip()

        try:
            data = json.loads(response_text)
        except ValueError as e:
            logger.error(f"Failed to parse AI response: {response_text[:200]}")
            raise GenerationError("Invalid JSON response from AI", str(e)) from e

        if not isinstance(data, dict):
            raise GenerationError("Invalid JSON response from AI", "Response is not an object")
        return data

    def _build_lesson(self, data: Dict[str, Any], request: ContentRequest) -> LessonPlan:
        """Fill in ids and asset metadata, then validate the lesson."""
        raw_chapters = data.get("chapters")
        if not isinstance(raw_chapters, list):
            raise GenerationError("Invalid JSON response from AI", "Missing 'chapters' list")

        stamp = now_ms()
        try:
            chapters = []
            for c, chapter in enumerate(raw_chapters):
                if not isinstance(chapter, dict):
                    raise GenerationError("Invalid lesson structure from AI", f"Chapter {c} is not an object")
                steps = []
                for s, step in enumerate(chapter.get("steps") or []):
                    if not isinstance(step, dict):
                        raise GenerationError("Invalid lesson structure from AI", f"Step {c}-{s} is not an object")
                    asset = _as_asset(step.get("content"))
                    asset["content"] = _as_text(asset.get("content", ""))
                    steps.append({
                        **step,
                        "id": step.get("id") or f"step-{c}-{s}",
                        "content": {
                            **asset,
                            "id": f"asset-{c}-{s}",
                            "node_id": f"node-{c}-{s}",
                            "status": "READY",
                            "generator_version": GENERATOR_VERSION,
                        },
                    })
                chapters.append({
                    **chapter,
                    "id": chapter.get("id") or f"chapter-{c}",
                    "steps": steps,
                })

            return LessonPlan(
                id=f"lesson-{stamp}",
                topic=data.get("topic") or request.query,
                mode=request.mode,
                chapters=chapters,
                createdAt=stamp,
            )
        except (ValidationError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Generated lesson failed validation: {e}")
            raise GenerationError("Invalid lesson structure from AI", str(e)) from e


def _as_text(value: Any) -> str:
    # Animation payloads sometimes come back as objects instead of JSON strings
    return value if isinstance(value, str) else json.dumps(value)


def _as_asset(value: Any) -> Dict[str, Any]:
    # A bare string is the slide body itself
    if isinstance(value, dict):
        return dict(value)
    if value is None:
        return {}
    return {"content": value}
