# quizwiz/main.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quizwiz.core import config
from quizwiz.database.session import init_db
from quizwiz.routers import evaluator, progress_router, session_router
from quizwiz.routers.deps import get_evaluation_service
from quizwiz.services.evaluation_service import EvaluationService

load_dotenv()

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


# ==================== FastAPI App ====================
app = FastAPI(
    title="Quizwiz answer evaluation service",
    description="Grades math, science and english answers and drives learning sessions",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router.router)
app.include_router(progress_router.router)
app.include_router(evaluator.router)


@app.get("/api/health")
async def health(service: EvaluationService = Depends(get_evaluation_service)):
    registry = service.registry
    return {
        "status": "healthy",
        "evaluators": registry.list_evaluators(),
        "grading_timeout_seconds": config.GRADING_TIMEOUT_SECONDS,
    }


# ==================== Run Server ====================
if __name__ == "__main__":
    uvicorn.run("quizwiz.main:app", host="127.0.0.1", port=5010, reload=True, log_level="info")
