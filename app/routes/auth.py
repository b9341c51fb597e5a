from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from fastapi.params import Body
from starlette import status

from app.models import User
from app.schemas.auth import (
    AuthenticationResponseSchema,
    LoginSchema,
    RegisterSchema,
    UserPrincipal,
)
from app.schemas.responses import ApiResponse, ErrorResponse
from app.schemas.users import UserRetrieveSchema
from app.services.auth import UserLoginInteractor, UserRegisterInteractor
from app.services.providers.protocols.token_provider import ITokenProvider

router = APIRouter(prefix="/auth", tags=["auth"], route_class=DishkaRoute)


def build_auth_response(
    user: User, token_encoder: ITokenProvider
) -> AuthenticationResponseSchema:
    return AuthenticationResponseSchema(
        access_token=token_encoder.encode_token(UserPrincipal.model_validate(user)),
        expires_in=token_encoder.expires_in,
        user=UserRetrieveSchema.model_validate(user),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
async def register(
    data: RegisterSchema,
    service: FromDishka[UserRegisterInteractor],
    token_encoder: FromDishka[ITokenProvider],
) -> ApiResponse[AuthenticationResponseSchema]:
    user = await service(data)
    return ApiResponse(
        message="User registered successfully",
        data=build_auth_response(user, token_encoder),
    )


@router.post(
    "/login",
    summary="Login user",
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)
async def login(
    data: Annotated[LoginSchema, Body()],
    service: FromDishka[UserLoginInteractor],
    token_encoder: FromDishka[ITokenProvider],
) -> ApiResponse[AuthenticationResponseSchema]:
    user = await service(data)
    return ApiResponse(
        message="Login successful",
        data=build_auth_response(user, token_encoder),
    )
