from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from starlette import status

from app.schemas.health import HealthSchema
from app.schemas.responses import ApiResponse, ErrorResponse
from app.services.health import HealthChecker

router = APIRouter(
    prefix="/health",
    tags=["health"],
    route_class=DishkaRoute,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}},
)


@router.get("", summary="Check overall application health")
async def health(checker: FromDishka[HealthChecker]) -> ApiResponse[HealthSchema]:
    result = await checker.check(
        {"database": checker.database, "memory_rss": checker.memory_rss}
    )
    return ApiResponse(message="Health retrieved successfully", data=result)


@router.get("/db", summary="Check database health")
async def health_db(checker: FromDishka[HealthChecker]) -> ApiResponse[HealthSchema]:
    result = await checker.check({"database": checker.database})
    return ApiResponse(message="Database is healthy", data=result)


@router.get("/memory", summary="Check memory usage")
async def health_memory(checker: FromDishka[HealthChecker]) -> ApiResponse[HealthSchema]:
    result = await checker.check({"memory_rss": checker.memory_rss})
    return ApiResponse(message="Memory usage is healthy", data=result)
