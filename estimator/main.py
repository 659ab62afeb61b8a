from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .logging_config import setup_logging
from .routers import estimates

setup_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = logging.getLogger("estimator")

app = FastAPI(
    title=settings.APP_NAME,
    description="Cost estimate computation — sections, line items, subtotals, tax",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimates.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "estimate-engine", "tax_rate": settings.TAX_RATE}


logger.info("Estimate API ready (tax rate %.2f)", settings.TAX_RATE)
