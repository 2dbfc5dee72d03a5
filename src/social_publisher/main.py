# src/social_publisher/main.py
import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from social_publisher.errors import register_exception_handlers
from social_publisher.infrastructure.database import init_db
from social_publisher.middleware.logging import RequestIdMiddleware
from social_publisher.routers.accounts_router import router as accounts_router
from social_publisher.routers.auth_router import router as auth_router
from social_publisher.routers.campaigns_router import router as campaigns_router
from social_publisher.routers.post_router import router as post_router
from social_publisher.routers.user_router import router as user_router

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_structlog():
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, LOG_LEVEL, logging.INFO)),
        context_class=dict,
    )


configure_structlog()
logger = structlog.get_logger()

app = FastAPI(title="Social Publisher")

app.add_middleware(RequestIdMiddleware)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(post_router)
app.include_router(accounts_router)
app.include_router(campaigns_router)


@app.on_event("startup")
async def on_startup():
    await init_db()
    logger.info("app_startup")


def run():
    uvicorn.run("social_publisher.main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)))


if __name__ == "__main__":
    run()
