from pathlib import Path
from typing import Optional
import logging

import uvicorn

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from tasklist.app.routes import pages, tasks
from tasklist.app.middleware.access_log import AccessLogMiddleware
from tasklist.config import Settings
from tasklist.infra.db.task_repo_memory import DEMO_TASKS, InMemoryTaskRepo
from tasklist.infra.db.task_repo_sqlite import SQLiteTaskRepo
from tasklist.infra.rest.task_repo_rest import RestTaskRepo
from tasklist.observability.logging import setup_logging
from tasklist.services.task_service import TaskListStore, TaskRepo

BASE_DIR = Path(__file__).resolve().parent
logger = logging.getLogger("tasklist.system")


def build_repo(settings: Settings) -> TaskRepo:
    if settings.backend == "rest":
        return RestTaskRepo(settings.store_url, settings.store_key, table=settings.table, timeout=settings.timeout)
    if settings.backend == "sqlite":
        return SQLiteTaskRepo.from_path(settings.db_path)
    return InMemoryTaskRepo(seed=DEMO_TASKS)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TaskListStore] = None,
    configure_logging: bool = True,
) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()  # ConfigError here is fatal
    if configure_logging:
        setup_logging(settings.log_level, settings.log_dir)
    if store is None:
        store = TaskListStore(build_repo(settings))

    logger.info(
        "system.start",
        extra={"category": "system", "event": "system.start", "backend": settings.backend},
    )

    app = FastAPI(title="Task List")
    app.state.store = store
    app.add_middleware(AccessLogMiddleware)

    # Static files (CSS)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    app.include_router(tasks.router)
    app.include_router(pages.router)

    @app.on_event("startup")
    async def _startup():
        if isinstance(store.repo, SQLiteTaskRepo):
            await store.repo.create_tables()
            logger.info(
                "db.ready",
                extra={"category": "system", "event": "db.ready", "db_path": settings.db_path},
            )
        # a failed first fetch leaves the store in the loading phase
        await store.load()

    @app.on_event("shutdown")
    async def _shutdown():
        await store.close()
        logger.info("system.stop", extra={"category": "system", "event": "system.stop"})

    @app.get("/health")
    def health(request: Request):
        return {"status": "ok", "phase": request.app.state.store.phase.value}

    return app


def run() -> None:
    settings = Settings.from_env()
    uvicorn.run("tasklist.app.main:create_app", factory=True, host=settings.host, port=settings.port)
