from fastapi import APIRouter, Depends, HTTPException, Request, Response
from tasklist.domain.task_models import Task, TaskCreate, TaskFilter
from tasklist.services.task_service import MutationResult, Outcome, TaskListStore

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_store(request: Request) -> TaskListStore:
    # wired in main.create_app
    return request.app.state.store


def _raise_on_failure(result: MutationResult) -> None:
    if result.outcome is Outcome.failed:
        raise HTTPException(status_code=502, detail=f"Task store unavailable: {result.error}")


@router.get("", response_model=list[Task])
async def list_tasks(filter: TaskFilter = TaskFilter.all, store: TaskListStore = Depends(get_store)):
    return store.list(filter)


@router.get("/stats")
async def task_stats(store: TaskListStore = Depends(get_store)):
    stats = store.stats()
    return {"phase": store.phase.value, "total": stats.total, "active": stats.active, "done": stats.done}


@router.post("", response_model=Task, status_code=201)
async def create_task(payload: TaskCreate, store: TaskListStore = Depends(get_store)):
    result = await store.add(payload.text, payload.priority)
    _raise_on_failure(result)
    return result.task


@router.post("/reload")
async def reload_tasks(store: TaskListStore = Depends(get_store)):
    if not await store.load():
        raise HTTPException(status_code=502, detail="Task store unavailable")
    return {"phase": store.phase.value, "total": len(store.tasks)}


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: int, store: TaskListStore = Depends(get_store)):
    result = await store.toggle(task_id)
    _raise_on_failure(result)
    if result.outcome is Outcome.not_found:
        raise HTTPException(status_code=404, detail="Task not found")
    return result.task


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: int, store: TaskListStore = Depends(get_store)):
    result = await store.delete(task_id)
    _raise_on_failure(result)
    return Response(status_code=204)
