from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import ValidationError

from ..errors import TodoNotFoundError, TodoValidationError, validation_message
from ..repositories import TodoRepository, get_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)


def _parse_patch(payload: Any) -> TodoUpdate:
    """
    Validate a raw PUT body into a TodoUpdate patch.

    A missing body counts as an empty object, which fails with
    'No valid fields to update'.
    """
    try:
        return TodoUpdate.model_validate({} if payload is None else payload)
    except ValidationError as e:
        raise TodoValidationError(validation_message(e.errors())) from e


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List all todos, newest first (ordered by createdAt descending).",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Store error"},
    },
)
def list_todos(repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    """
    List every Todo, newest first.
    """
    return [TodoOut(**it) for it in repo.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Text missing or empty"},
        500: {"description": "Store error"},
    },
)
def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo. The text has already been trimmed by the schema.
    """
    created = repo.create(payload)
    return TodoOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Update the text and/or completed flag of a Todo item. Fields omitted from the body "
        "are left untouched; at least one must be supplied."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Invalid id or fields"},
        404: {"description": "Todo not found"},
        500: {"description": "Store error"},
    },
)
def update_todo(
    todo_id: int,
    payload: Any = Body(None, examples=[{"text": "buy oat milk", "completed": True}]),
    repo: TodoRepository = Depends(get_repository),
) -> TodoOut:
    """
    Partial update of a Todo item.

    The existence check runs before the body is validated, so an unknown id
    is a 404 whatever the payload. The update itself reports a row deleted in
    the meantime as not found.
    """
    if repo.get(todo_id) is None:
        raise TodoNotFoundError(todo_id)

    patch = _parse_patch(payload)
    updated = repo.update(todo_id, patch)
    if updated is None:
        raise TodoNotFoundError(todo_id)
    return TodoOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        400: {"description": "Invalid id"},
        404: {"description": "Todo not found"},
        500: {"description": "Store error"},
    },
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(get_repository)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(todo_id):
        raise TodoNotFoundError(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
