from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from dotenv import load_dotenv

from classwork.core.config import get_settings
from classwork.api.v1 import student
from classwork.services.classwork_source import create_classwork_source
from classwork.services.errors import ClassworkSourceError

load_dotenv()

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        app.state.classwork_source = create_classwork_source(settings)
        logger.info(f"Serving classwork from the {app.state.classwork_source.name} source")
    except ClassworkSourceError as e:
        logger.error(f"Classwork source not available: {e}")
        app.state.classwork_source = None
    yield
    # Shutdown
    if app.state.classwork_source is not None:
        await app.state.classwork_source.close()


app = FastAPI(
    title="Classwork API",
    description="Visibility of assignments and quizzes for students",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(student.router, prefix="/api/v1/student", tags=["student"])


@app.get("/")
async def root():
    return {"message": "Classwork API is running"}


@app.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {"status": "healthy", "service": "classwork-api"}


@app.get("/health/detailed")
async def detailed_health_check():
    """Health check including a full read of the configured source"""
    source = getattr(app.state, "classwork_source", None)
    health_status = {
        "status": "healthy",
        "service": "classwork-api",
        "environment": settings.ENVIRONMENT,
        "checks": {}
    }

    if source is None:
        health_status["status"] = "unhealthy"
        health_status["checks"]["source"] = "not configured"
        return health_status

    try:
        snapshot = await source.load()
        health_status["checks"]["source"] = "ok"
        health_status["checks"]["records"] = {
            "memberships": len(snapshot.memberships),
            "stream_items": len(snapshot.stream_items),
            "assignments": len(snapshot.assignments),
            "quizzes": len(snapshot.quizzes),
        }
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["source"] = f"error: {str(e)}"

    return health_status
