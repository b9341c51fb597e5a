from fastapi import APIRouter
from dishka.integrations.fastapi import DishkaRoute

from app.routes.auth import router as auth_router
from app.routes.users import router as users_router


router = APIRouter(prefix="/api", route_class=DishkaRoute)
router.include_router(auth_router)
router.include_router(users_router)
