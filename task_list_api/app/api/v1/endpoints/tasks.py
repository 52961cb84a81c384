"""
Task endpoints for API v1.

Every route works on the tasks of the authenticated user only.  A task
of another user, an unknown ID and a deleted task all produce the same
404 response.  ``DELETE`` performs a soft delete.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from task_list_api.app.core.exceptions import NotFoundError, ValidationError
from task_list_api.app.core.security import get_current_user
from task_list_api.app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from task_list_api.app.schemas.user import UserRead
from task_list_api.app.services.task_service import TaskService


router = APIRouter()

TASKS_PATH = "/api/v1/tasks"


async def get_owned_task(
    task_id: int,
    current_user: UserRead = Depends(get_current_user),
) -> TaskRead:
    """Resolve ``task_id`` among the current user's tasks or respond 404."""
    try:
        return await TaskService.find_task(current_user, task_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


def _unprocessable(e: ValidationError, submitted: dict) -> HTTPException:
    # Submitted values are echoed next to the errors.
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"errors": e.errors, "task": submitted},
    )


@router.get("/", response_model=List[TaskRead])
async def list_tasks(current_user: UserRead = Depends(get_current_user)) -> List[TaskRead]:
    """Return all tasks of the current user, oldest first."""
    return await TaskService.list_tasks(current_user)


@router.get("/new", response_model=TaskRead)
async def new_task(current_user: UserRead = Depends(get_current_user)) -> TaskRead:
    """Return an unsaved task with default values to prefill a form."""
    return TaskService.build_task(current_user)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task: TaskRead = Depends(get_owned_task)) -> TaskRead:
    """Retrieve a single task of the current user."""
    return task


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    response: Response,
    current_user: UserRead = Depends(get_current_user),
) -> TaskRead:
    """Create a task owned by the current user.

    Responds 201 with the task and a ``Location`` header pointing to
    it, or 422 with ``{"errors": {field: [messages]}, "task": {...}}``
    when the title is blank.
    """
    try:
        created = await TaskService.create_task(current_user, task)
    except ValidationError as e:
        raise _unprocessable(e, task.model_dump()) from e
    response.headers["Location"] = f"{TASKS_PATH}/{created.id}"
    response.headers["X-Notice"] = "Task was successfully created."
    return created


@router.patch("/{task_id}", response_model=TaskRead)
@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    updates: TaskUpdate,
    response: Response,
    task: TaskRead = Depends(get_owned_task),
) -> TaskRead:
    """Change the title and/or completion flag of a task."""
    try:
        updated = await TaskService.update_task(task, updates)
    except ValidationError as e:
        raise _unprocessable(e, updates.model_dump(exclude_unset=True)) from e
    response.headers["Location"] = f"{TASKS_PATH}/{updated.id}"
    response.headers["X-Notice"] = "Task was successfully updated."
    return updated


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task: TaskRead = Depends(get_owned_task)) -> Response:
    """Soft-delete a task.

    The task disappears from every listing and lookup but stays in the
    database.  Responds 204 with a ``Location`` header pointing to the
    task list.
    """
    await TaskService.soft_delete_task(task)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"Location": f"{TASKS_PATH}/", "X-Notice": "Task was successfully destroyed."},
    )
