"""
Error types reported to callers of the store and the extractor.
Each carries the HTTP status the API answers with.
"""
from typing import Any, Optional


class TaskError(Exception):
    status_code = 500

    def __init__(self, message: str, cause: Any = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def details(self) -> Any:
        if self.cause is None:
            return None
        if isinstance(self.cause, BaseException):
            return str(self.cause)
        return self.cause

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details()}


class InvalidInputError(TaskError):
    status_code = 400


class GenerationServiceError(TaskError):
    status_code = 502


class MalformedGenerationOutputError(TaskError):
    status_code = 502


class TaskValidationError(TaskError):
    """Record failed schema checks. cause is a list of {field, message}."""
    status_code = 422

    @classmethod
    def from_pydantic(cls, message: str, error) -> "TaskValidationError":
        fields = [
            {
                "field": ".".join(str(part) for part in item["loc"]) or "__root__",
                "message": item["msg"],
            }
            for item in error.errors()
        ]
        return cls(message, cause=fields)


class StoreError(TaskError):
    status_code = 500


class TaskNotFoundError(TaskError):
    status_code = 404

    def __init__(self, task_id: int, cause: Optional[Any] = None):
        super().__init__("Task not found", cause=cause)
        self.task_id = task_id
