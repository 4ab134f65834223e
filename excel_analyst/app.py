from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import asyncio
import logging

from .api.upload_routes import router as upload_router
from .api.chat_routes import router as chat_router
from .api.report_routes import router as report_router
from .api.session_routes import router as session_router
from .config import settings
from .orchestrator.orchestrator import Orchestrator, get_orchestrator

# 配置日志 (Configure logging)
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Excel AI Analyst API...")
    orchestrator = get_orchestrator()
    # 每小时清理过期会话
    sweeper = asyncio.create_task(orchestrator.store.run_sweeper(settings.SESSION_SWEEP_INTERVAL))
    yield
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass
    logger.info("Shutting down Excel AI Analyst API...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Análisis de archivos Excel/CSV con preguntas en lenguaje natural",
    version="1.0.0",
    lifespan=lifespan
)

# 配置CORS (Configure CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"]
)

# 注册路由 (Register routes)
app.include_router(upload_router, prefix=settings.API_V1_STR, tags=["upload"])
app.include_router(chat_router, prefix=settings.API_V1_STR, tags=["chat"])
app.include_router(report_router, prefix=settings.API_V1_STR, tags=["reports"])
app.include_router(session_router, prefix=f"{settings.API_V1_STR}/session", tags=["session"])


@app.get("/")
async def root():
    return {
        "message": "Welcome to Excel AI Analyst API",
        "version": "1.0.0",
        "features": [
            "Excel/CSV Upload",
            "Natural Language Questions",
            "Automatic Metrics and Distributions",
            "Chart Data Selection",
            "Strategic Reports (JSON and Word)"
        ],
        "docs": "/docs"
    }


@app.get("/health")
async def health_check(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "activeSessions": len(orchestrator.store)
    }
