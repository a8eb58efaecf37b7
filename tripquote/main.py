import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripquote.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(settings.log_dir)
_LOG_DIR.mkdir(parents=True, exist_ok=True)

_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "tripquote.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from tripquote.routers import currency, quotes, travelers
from tripquote.services.cache_service import cache_service
from tripquote.services.currency_service import currency_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Quote engine started, default currency {settings.default_currency}")

    yield

    # Shutdown
    await currency_service.close()
    await cache_service.close()


app = FastAPI(
    title="TripQuote",
    description="Itinerary composition and pricing engine",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(travelers.router, prefix="/api/travelers", tags=["travelers"])
app.include_router(currency.router, prefix="/api/currency", tags=["currency"])
app.include_router(quotes.router, prefix="/api/quotes", tags=["quotes"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "tripquote"}
