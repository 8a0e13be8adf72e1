"""
Local lesson generator used when the remote model is unavailable or fails.
"""
import json
import logging
from typing import Dict, Optional

from app.schemas.lesson import ContentRequest, LessonMode, LessonPlan, VisualAsset
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)

MOCK_GENERATOR_VERSION = "mock"

# Ready-made assets for a few well known queries
MOCK_ASSETS: Dict[str, Dict] = {
    "french revolution": {
        "id": "asset-001",
        "node_id": "topic-french-rev",
        "visual_type": "SLIDE",
        "title": "The French Revolution",
        "content": (
            "# Liberty, Equality, Fraternity\n\nThe French Revolution was a period of radical political "
            "and societal change in France that began with the Estates General of 1789 and ended with "
            "the formation of the French Consulate in November 1799."
        ),
        "image_url": "https://images.unsplash.com/photo-1568607689150-17e625c1586e?auto=format&fit=crop&q=80&w=1000",
    },
    "photosynthesis": {
        "id": "asset-002",
        "node_id": "topic-photosynthesis",
        "visual_type": "DIAGRAM",
        "title": "Photosynthesis Process",
        "content": (
            "graph TD\n    A[Sunlight] --> B(Chloroplast)\n    C[Water] --> B\n    D[CO2] --> B\n"
            "    B --> E[Glucose]\n    B --> F[Oxygen]"
        ),
    },
    "dynasties": {
        "id": "asset-003",
        "node_id": "topic-dynasties",
        "visual_type": "SLIDE",
        "title": "Chinese Dynasties",
        "content": "Sort the dynasties in chronological order.",
        "config_json": {
            "template_id": "T1_DragSort",
            "data": {
                "items": ["Qin", "Han", "Tang", "Song"],
                "correct_order": ["Qin", "Han", "Tang", "Song"],
            },
            "hint": "Think: Qin Huang Han Wu...",
        },
    },
    "bubble sort": {
        "id": "asset-004",
        "node_id": "topic-bubble-sort",
        "visual_type": "ANIMATION",
        "title": "Bubble Sort Visualization",
        "content": json.dumps({
            "type": "sorting",
            "description": "Bubble Sort Step-by-Step",
            "steps": [
                {"name": "Step 1", "data": [{"name": "A", "value": 5}, {"name": "B", "value": 3}, {"name": "C", "value": 8}, {"name": "D", "value": 1}]},
                {"name": "Step 2", "data": [{"name": "A", "value": 3}, {"name": "B", "value": 5}, {"name": "C", "value": 8}, {"name": "D", "value": 1}]},
                {"name": "Step 3", "data": [{"name": "A", "value": 3}, {"name": "B", "value": 5}, {"name": "C", "value": 1}, {"name": "D", "value": 8}]},
                {"name": "Step 4", "data": [{"name": "A", "value": 3}, {"name": "B", "value": 1}, {"name": "C", "value": 5}, {"name": "D", "value": 8}]},
                {"name": "Step 5", "data": [{"name": "A", "value": 1}, {"name": "B", "value": 3}, {"name": "C", "value": 5}, {"name": "D", "value": 8}]},
            ],
        }),
    },
}

DRAG_SORT_CONFIG = {
    "template_id": "T1_DragSort",
    "data": {"items": ["A", "B"], "correct_order": ["A", "B"]},
}


class MockLessonGenerator:
    """Builds lessons from a fixed template. Never calls out."""

    def generate_lesson(self, request: ContentRequest) -> LessonPlan:
        """
        Build a two chapter lesson for the query.

        Interview lessons open with a flashcard, Feynman lessons with a concept slide.
        """
        logger.info(f"Mock generating lesson for: {request.query}, Mode: {request.mode.value}")

        query = request.query
        interview = request.mode == LessonMode.INTERVIEW
        stamp = request.timestamp or now_ms()

        opening_step = {
            "id": "step-1-1",
            "type": "FLASHCARD" if interview else "CONCEPT",
            "title": "Core Question" if interview else "Introduction",
            "content": self._asset(
                "1-1",
                title=query,
                content=(
                    f"# Interview Question\n\nExplain the core concept of **{query}**."
                    if interview
                    else f"# What is {query}?\n\nHere is a simple explanation of the concept..."
                ),
                image_url="https://source.unsplash.com/1600x900/?education",
            ),
        }
        if interview:
            opening_step["flashcard"] = {
                "front": f"What is {query}?",
                "back": "It is a fundamental concept in...",
            }

        return LessonPlan(
            id=f"lesson-{stamp}",
            topic=query,
            mode=request.mode,
            createdAt=stamp,
            chapters=[
                {
                    "id": "chapter-1",
                    "title": "Chapter 1: Core Concepts",
                    "steps": [
                        opening_step,
                        {
                            "id": "step-1-2",
                            "type": "ANALOGY",
                            "title": "Analogy",
                            "content": self._asset(
                                "1-2",
                                title="Real World Analogy",
                                content=f"# Like a Pizza Shop...\n\nImagine {query} is like a pizza shop where...",
                                image_url="https://source.unsplash.com/1600x900/?pizza",
                            ),
                        },
                    ],
                },
                {
                    "id": "chapter-2",
                    "title": "Chapter 2: Practice",
                    "steps": [
                        {
                            "id": "step-2-1",
                            "type": "QUIZ",
                            "title": "Quick Quiz",
                            "content": self._asset(
                                "2-1",
                                title="Test Your Knowledge",
                                content="Sort the following items:",
                                config_json={
                                    "template_id": "T1_DragSort",
                                    "data": {
                                        "items": ["Step A", "Step B", "Step C"],
                                        "correct_order": ["Step A", "Step B", "Step C"],
                                    },
                                    "hint": "Order logically...",
                                },
                            ),
                            "quizConfig": DRAG_SORT_CONFIG,
                        },
                    ],
                },
            ],
        )

    def generate_visual(self, request: ContentRequest) -> VisualAsset:
        """A canned asset when the query names one, otherwise the lesson's first slide."""
        query = request.query.lower()
        for keyword, asset in MOCK_ASSETS.items():
            if keyword in query:
                return VisualAsset(**asset, generator_version="v2.2", status="READY")

        lesson = self.generate_lesson(request)
        return lesson.chapters[0].steps[0].content

    @staticmethod
    def _asset(suffix: str, title: str, content: str, image_url: Optional[str] = None, config_json=None) -> Dict:
        asset = {
            "id": f"asset-{suffix}",
            "node_id": f"node-{suffix}",
            "visual_type": "SLIDE",
            "title": title,
            "content": content,
            "generator_version": MOCK_GENERATOR_VERSION,
            "status": "READY",
        }
        if image_url:
            asset["image_url"] = image_url
        if config_json:
            asset["config_json"] = config_json
        return asset
