import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitbody.api.router import api_router
from fitbody.core.config import settings
from fitbody.core.database import init_database
from fitbody.services.openfoodfacts_service import openfoodfacts_service

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FitBody Track - workouts, nutrition and progress tracking")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    await init_database()
    logger.info("Приложение запущено")


@app.on_event("shutdown")
async def shutdown_event():
    await openfoodfacts_service.close()


@app.get("/")
async def root():
    return {"message": "FitBody Track API is running!", "docs": "/docs"}
