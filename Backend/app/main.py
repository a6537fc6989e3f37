import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import app.db.models
from app.db.base import Base
from app.db.engine import engine
from app.config import CORS_ALLOW_ORIGINS, LOG_LEVEL
from app.core.errors import register_exception_handlers
from app.core.rate_limit import build_rate_limiter, rate_limit_middleware
from app.routes import api_v1 as api_v1_routes
from app.routes import health as health_routes
from app.routes import users as users_routes

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Good Night")
app.include_router(health_routes.router)
app.include_router(users_routes.router)
app.include_router(api_v1_routes.router)

register_exception_handlers(app)

app.state.rate_limiter = build_rate_limiter()
app.middleware("http")(rate_limit_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    Base.metadata.create_all(bind=engine)
    limiter = app.state.rate_limiter
    logger.info(
        "Rate limiting %s (%s requests / %ss, %s store)",
        "enabled" if limiter.enabled else "disabled",
        limiter.limit,
        limiter.period,
        type(limiter.store).__name__,
    )
