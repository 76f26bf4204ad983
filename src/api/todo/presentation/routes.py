"""HTTP routes for the Todo bounded context.

All routes require a bearer access token. Responses for todos that do not
exist and for todos in other tenants are identical.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from iam.application.value_objects import CurrentUser
from iam.dependencies.user import get_current_user
from shared_kernel.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from todo.application.services import TodoService
from todo.dependencies import get_todo_service
from todo.domain.value_objects import TodoId
from todo.presentation.models import (
    CreateTodoRequest,
    TodoListResponse,
    TodoResponse,
    UpdateTodoRequest,
)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_LIMIT = Query(0, description="Page size (default 20, max 100)")
_OFFSET = Query(0, description="Number of todos to skip")


def _parse_todo_id(todo_id: str) -> TodoId:
    try:
        return TodoId.from_string(todo_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid todo ID format",
        )


@router.get(
    "",
    response_model=TodoListResponse,
    summary="List my todos",
    description="List the caller's own todos, newest first.",
    responses={
        200: {"description": "Page of todos"},
        401: {"description": "Authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def list_todos(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
    limit: int = _LIMIT,
    offset: int = _OFFSET,
) -> TodoListResponse:
    """List the caller's todos."""
    try:
        page = await service.list_my_todos(current_user, limit=limit, offset=offset)
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get todos",
        )

    return TodoListResponse.from_page(page)


@router.get(
    "/public",
    response_model=TodoListResponse,
    summary="List public todos",
    description="""
List the public todos of the caller's tenant, newest first, together with
the name of each todo's creator.
""",
    responses={
        200: {"description": "Page of public todos"},
        401: {"description": "Authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def list_public_todos(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
    limit: int = _LIMIT,
    offset: int = _OFFSET,
) -> TodoListResponse:
    """List the tenant's public todos."""
    try:
        page = await service.list_public_todos(
            current_user, limit=limit, offset=offset
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get public todos",
        )

    return TodoListResponse.from_page(page)


@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a todo",
    description="Create a todo owned by the caller.",
    responses={
        201: {"description": "Todo created"},
        400: {"description": "Invalid todo data"},
        401: {"description": "Authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def create_todo(
    request: CreateTodoRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """Create a todo."""
    try:
        todo = await service.create_todo(
            current_user,
            title=request.title,
            description=request.description,
            is_public=request.is_public,
            due_date=request.due_date,
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create todo",
        )

    return TodoResponse.from_domain(todo)


@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get a todo",
    description="""
Return a todo the caller owns, or a public todo of the caller's tenant.

Returns 404 if the todo does not exist or belongs to a different tenant.
""",
    responses={
        200: {"description": "Todo returned"},
        400: {"description": "Invalid todo ID format"},
        401: {"description": "Authentication required"},
        403: {"description": "Todo is private to another user"},
        404: {"description": "Todo not found"},
        500: {"description": "Internal server error"},
    },
)
async def get_todo(
    todo_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """Get a todo by ID."""
    todo_id_obj = _parse_todo_id(todo_id)

    try:
        todo = await service.get_todo(current_user, todo_id_obj)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="todo not found",
        )
    except ForbiddenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="not allowed to access this todo",
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get todo",
        )

    return TodoResponse.from_domain(todo)


@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update a todo",
    description="""
Update a todo the caller owns. Only the fields present in the request body
are changed.
""",
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Invalid todo ID or data"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller does not own the todo"},
        404: {"description": "Todo not found"},
        500: {"description": "Internal server error"},
    },
)
async def update_todo(
    todo_id: str,
    request: UpdateTodoRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """Update a todo."""
    todo_id_obj = _parse_todo_id(todo_id)

    try:
        todo = await service.update_todo(
            current_user, todo_id_obj, request.to_changes()
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="todo not found",
        )
    except ForbiddenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="not allowed to update this todo",
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update todo",
        )

    return TodoResponse.from_domain(todo)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a todo",
    description="Delete a todo the caller owns.",
    responses={
        204: {"description": "Todo deleted"},
        400: {"description": "Invalid todo ID format"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller does not own the todo"},
        404: {"description": "Todo not found"},
        500: {"description": "Internal server error"},
    },
)
async def delete_todo(
    todo_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> Response:
    """Delete a todo."""
    todo_id_obj = _parse_todo_id(todo_id)

    try:
        await service.delete_todo(current_user, todo_id_obj)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="todo not found",
        )
    except ForbiddenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="not allowed to delete this todo",
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete todo",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
