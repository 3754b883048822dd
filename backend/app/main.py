from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import httpx
import logging

from app.config import settings
from app.database import Base, engine
from app.dependencies import build_eligibility_service
from app.models import airline, airport, flight  # noqa: F401  (register tables on Base)

# Configure basic logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        app.state.eligibility_service = build_eligibility_service(settings, client)
        yield
        app.state.eligibility_service.log_summary()
        await app.state.eligibility_service.aclose()


app = FastAPI(
    title=settings.app_name,
    description="Flight delay/cancellation compensation eligibility",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS setup
origins = ["*"]

if settings.env == "production":
    origins = []
    if settings.cors_origins:
        for o in settings.cors_origins.split(","):
            o = o.strip()
            if o and o not in origins:
                origins.append(o)

logger.info(f"CORS origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from app.routers import compensation, system
app.include_router(compensation.router)
app.include_router(system.router)

@app.get("/health")
def health_check():
    """
    Basic health check endpoint to verify service is running.
    """
    return {"status": "ok", "environment": settings.env}
