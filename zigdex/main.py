from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zigdex.api.deps import get_publish_token_summary_use_case
from zigdex.api.routers import swap, tokens, trades, zig
from zigdex.infrastructure.db.engine import get_engine
from zigdex.infrastructure.pubsub.redis_client import get_redis_client
from zigdex.infrastructure.pubsub.token_dirty_listener import TokenDirtyListener
from zigdex.shared.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


def _start_listener() -> TokenDirtyListener | None:
    if not settings.redis_url or not settings.postgres_dsn:
        logger.info("app: realtime summaries disabled")
        return None
    publisher = get_publish_token_summary_use_case()
    listener = TokenDirtyListener(
        client=get_redis_client(settings.redis_url),
        channel=settings.rt_token_dirty_channel,
        handler=publisher.handle_message,
    )
    listener.start()
    return listener


@asynccontextmanager
async def lifespan(_app: FastAPI):
    listener = _start_listener()
    try:
        yield
    finally:
        if listener is not None:
            listener.stop()
        if settings.redis_url:
            get_redis_client(settings.redis_url).close()
            get_redis_client.cache_clear()
        if settings.postgres_dsn:
            get_engine(
                settings.postgres_dsn,
                settings.db_pool_size,
                settings.db_pool_timeout_seconds,
                settings.db_statement_timeout_ms,
            ).dispose()
            get_engine.cache_clear()


app = FastAPI(title="ZigDex API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(tokens.router)
app.include_router(trades.router)
app.include_router(swap.router)
app.include_router(zig.router)


@app.get("/health")
def health():
    return {"status": "ok"}
