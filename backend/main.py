import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, configure_logging
from database import TaskStore
from errors import TaskError
from extractor import TaskExtractor
from generation import AnthropicGenerator, TextGenerator
from models import AITaskRequest, Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _store(request: Request) -> TaskStore:
    return request.app.state.store


@router.get("", response_model=list[Task])
def get_tasks(request: Request) -> list[Task]:
    return _store(request).list_all()


@router.post("", response_model=Task, status_code=201)
def create_task(task_data: TaskCreate, request: Request) -> Task:
    return _store(request).insert(task_data)


@router.post("/create-ai", response_model=Task, status_code=201)
async def create_task_from_text(body: AITaskRequest, request: Request) -> Task:
    """Create a task from free text through the generation service."""
    extractor: TaskExtractor = request.app.state.extractor
    return await extractor.extract_and_create(body.text or "")


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: int, request: Request) -> Task:
    return _store(request).get(task_id)


@router.put("/{task_id}", response_model=Task)
def update_task(task_id: int, task_data: TaskUpdate, request: Request) -> Task:
    return _store(request).update(task_id, task_data.model_dump(exclude_unset=True))


@router.delete("/{task_id}")
def delete_task(task_id: int, request: Request) -> dict:
    _store(request).delete(task_id)
    return {"message": "Task deleted"}


async def task_error_handler(_request: Request, exc: TaskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: %s (%s)", exc.message, exc.details())
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err["loc"][1:]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid data", "details": details})


def create_app(
    settings: Settings,
    store: Optional[TaskStore] = None,
    generator: Optional[TextGenerator] = None,
) -> FastAPI:
    store = store or TaskStore(settings.database_path)
    generator = generator or AnthropicGenerator(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # Startup
        configure_logging(settings.log_level)
        store.init_db()
        logger.info("Task store ready at %s", store.database_path)
        yield
        # Shutdown (nothing to do)

    app = FastAPI(title="Todo API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.extractor = TaskExtractor(store, generator)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)

    @app.get("/health")
    def health_check() -> dict:
        return {"status": "healthy"}

    return app


app = create_app(Settings.from_env())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
