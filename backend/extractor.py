"""
Natural-language task creation.

Free text goes to the generation service together with a snapshot of the
existing tasks; the reply is cleaned, parsed and validated, missing fields
are filled in (see due_dates for the date rules) and the result is inserted.
Insertion is the last step, so a failure anywhere leaves the store untouched.
"""
import json
import logging
import re
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from database import TaskStore
from due_dates import suggest_due_date, validate_due_date
from errors import (
    GenerationServiceError,
    InvalidInputError,
    MalformedGenerationOutputError,
    TaskError,
    TaskValidationError,
)
from generation import TextGenerator
from models import GeneratedTask, Task, TaskCreate
from prompts import build_extraction_prompt

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "No description provided"
DEFAULT_DURATION = 60  # minutes
DEFAULT_STATUS = "pending"

CODE_FENCE = re.compile(r"```[A-Za-z0-9_-]*")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers (```json, ```) and surrounding whitespace."""
    return CODE_FENCE.sub("", text).strip()


def build_context(tasks: list[Task]) -> list[dict]:
    """Project tasks to the summary fields embedded in the prompt."""
    return [
        {
            "title": task.title,
            "dueDate": task.due_date.isoformat() if task.due_date else None,
            "duration": task.duration,
            "status": task.status,
        }
        for task in tasks
    ]


class TaskExtractor:
    def __init__(
        self,
        store: TaskStore,
        generator: TextGenerator,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.generator = generator
        self.now = now

    async def extract_and_create(self, text: str) -> Task:
        if not text or not text.strip():
            raise InvalidInputError("Text input is required")

        now = self.now()
        existing = self.store.list_all()
        prompt = build_extraction_prompt(text, build_context(existing), now.date().isoformat())

        try:
            reply = await self.generator.generate(prompt)
        except TaskError:
            raise
        except Exception as e:
            logger.warning("Generation call failed: %s", e)
            raise GenerationServiceError("Generation service request failed", cause=e) from e
        logger.debug("Generation response: %s", reply)

        parsed = self._parse(reply)
        task = self._resolve(parsed, [t.due_date for t in existing], now)
        return self.store.insert(task)

    def _parse(self, reply: str) -> dict:
        cleaned = strip_code_fences(reply)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning("Generation output is not valid JSON: %r", cleaned[:200])
            raise MalformedGenerationOutputError("Failed to parse AI response", cause=e) from e
        if not isinstance(parsed, dict):
            raise TaskValidationError(
                "AI response is not a task object",
                cause=[{"field": "__root__", "message": f"expected a JSON object, got {type(parsed).__name__}"}],
            )
        return parsed

    def _resolve(self, parsed: dict, known_due_dates: list, now: datetime) -> TaskCreate:
        try:
            generated = GeneratedTask.model_validate(parsed)
        except ValidationError as e:
            logger.warning("Generated task has invalid fields: %s", e)
            raise TaskValidationError.from_pydantic("Generated task failed validation", e) from e

        if generated.due_date is not None:
            due_date = validate_due_date(generated.due_date, now)
        else:
            due_date = suggest_due_date(known_due_dates, now)

        try:
            return TaskCreate(
                title=generated.title,
                description=generated.description or DEFAULT_DESCRIPTION,
                due_date=due_date,
                duration=generated.duration if generated.duration is not None else DEFAULT_DURATION,
                status=generated.status or DEFAULT_STATUS,
            )
        except ValidationError as e:
            logger.warning("Generated task failed validation: %s", e)
            raise TaskValidationError.from_pydantic("Generated task failed validation", e) from e
