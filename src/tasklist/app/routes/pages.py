from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.templating import Jinja2Templates

from tasklist.app.routes.tasks import get_store
from tasklist.domain.task_models import TaskFilter, TaskPriority
from tasklist.services.task_service import StorePhase, TaskListStore

BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter(tags=["pages"])

FILTER_LABELS = {
    TaskFilter.all: "All",
    TaskFilter.active: "Active",
    TaskFilter.done: "Done",
}


def _back(flt: TaskFilter) -> RedirectResponse:
    return RedirectResponse(url=f"/?filter={flt.value}", status_code=303)


@router.get("/", response_class=HTMLResponse)
def home(request: Request, filter: TaskFilter = TaskFilter.all, store: TaskListStore = Depends(get_store)):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "tasks": store.list(filter),
            "filter": filter,
            "filters": FILTER_LABELS,
            "priorities": list(TaskPriority),
            "stats": store.stats(),
            "loading": store.phase is StorePhase.loading,
        },
    )


@router.post("/todos")
async def add_todo(
    text: str = Form(""),
    priority: str = Form(TaskPriority.medium.value),
    filter: TaskFilter = Form(TaskFilter.all),
    store: TaskListStore = Depends(get_store),
):
    # empty input and store failures both land back on the page unchanged
    await store.add(text, priority)
    return _back(filter)


@router.post("/todos/{task_id}/toggle")
async def toggle_todo(task_id: int, filter: TaskFilter = Form(TaskFilter.all), store: TaskListStore = Depends(get_store)):
    await store.toggle(task_id)
    return _back(filter)


@router.post("/todos/{task_id}/delete")
async def delete_todo(task_id: int, filter: TaskFilter = Form(TaskFilter.all), store: TaskListStore = Depends(get_store)):
    await store.delete(task_id)
    return _back(filter)
