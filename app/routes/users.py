from typing import Annotated
from uuid import UUID

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Depends, Query, Response
from pydantic import TypeAdapter
from starlette import status

from app.deps.auth import CurrentUser, CurrentUserDependency
from app.models.enums import UserRole
from app.schemas.responses import ApiResponse, ErrorResponse, PaginatedApiResponse
from app.schemas.users import (
    UserCreateSchema,
    UserQuerySchema,
    UserRetrieveSchema,
    UserSortField,
    UserUpdateSchema,
)
from app.services.auth.permissions import permission_required
from app.services.users import (
    CreateUserInteractor,
    DeleteUserInteractor,
    RetrieveUserInteractor,
    UpdateUserInteractor,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    route_class=DishkaRoute,
    dependencies=[CurrentUserDependency],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)


def get_user_query(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    sort_by: UserSortField = "created_at",
    sort_order: str = "DESC",
    role: UserRole | None = None,
    search: str | None = None,
) -> UserQuerySchema:
    return UserQuerySchema(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        role=role,
        search=search,
    )


UserQuery = Annotated[UserQuerySchema, Depends(get_user_query)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    dependencies=[permission_required(UserRole.ADMIN)],
    responses={status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
async def create_user(
    data: UserCreateSchema,
    service: FromDishka[CreateUserInteractor],
) -> ApiResponse[UserRetrieveSchema]:
    user = await service(data)
    return ApiResponse(
        message="User created successfully",
        data=UserRetrieveSchema.model_validate(user),
    )


@router.get("", summary="Get all users with pagination and filtering")
async def list_users(
    retrieve_users: FromDishka[RetrieveUserInteractor],
    query: UserQuery,
) -> PaginatedApiResponse[UserRetrieveSchema]:
    result = await retrieve_users.all(query)
    return PaginatedApiResponse(
        message="Users retrieved successfully",
        data=TypeAdapter(list[UserRetrieveSchema]).validate_python(result.items),
        pagination=result.pagination,
    )


@router.get("/me", summary="Get current user profile")
async def get_me(user: CurrentUser) -> ApiResponse[UserRetrieveSchema]:
    return ApiResponse(
        message="Current user retrieved successfully",
        data=UserRetrieveSchema.model_validate(user),
    )


@router.get(
    "/{user_id}",
    summary="Get user by ID",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_user(
    user_id: UUID,
    retrieve_users: FromDishka[RetrieveUserInteractor],
) -> ApiResponse[UserRetrieveSchema]:
    user = await retrieve_users.get_or_404(user_id)
    return ApiResponse(
        message="User retrieved successfully",
        data=UserRetrieveSchema.model_validate(user),
    )


@router.put(
    "/{user_id}",
    summary="Update user",
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def update_user(
    user_id: UUID,
    data: UserUpdateSchema,
    current_user: CurrentUser,
    service: FromDishka[UpdateUserInteractor],
) -> ApiResponse[UserRetrieveSchema]:
    user = await service(current_user, user_id, data)
    return ApiResponse(
        message="User updated successfully",
        data=UserRetrieveSchema.model_validate(user),
    )


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user (soft delete)",
    dependencies=[permission_required(UserRole.ADMIN)],
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: UUID,
    service: FromDishka[DeleteUserInteractor],
) -> Response:
    await service(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
