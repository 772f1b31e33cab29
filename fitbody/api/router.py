from fastapi import APIRouter
from fitbody.api.v1.auth import router as auth_router
from fitbody.api.v1.workouts import router as workouts_router
from fitbody.api.v1.nutrition import router as nutrition_router
from fitbody.api.v1.progress import router as progress_router
from fitbody.api.v1.analytics import router as analytics_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(nutrition_router, prefix="/nutrition", tags=["nutrition"])
api_router.include_router(progress_router, prefix="/progress", tags=["progress"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
