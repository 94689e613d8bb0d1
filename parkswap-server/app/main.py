import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api import create_api_router
from app.core.config import get_settings
from app.infrastructure.database import dispose_engine, init_db, session_scope
from app.modules.spots import SpotService

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def expire_spots_periodically(interval: int) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            async with session_scope() as session:
                service = SpotService.with_session(
                    session,
                    currency=settings.wallet.currency,
                    premium_parks_max=settings.premium_parks_max,
                )
                await service.expire_spots()
        except Exception:
            logger.exception("Spot expiry sweep failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    sweeper = None
    if settings.spots.expiry_sweep_seconds > 0:
        sweeper = asyncio.create_task(expire_spots_periodically(settings.spots.expiry_sweep_seconds))
    yield
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Peer-to-peer parking spot exchange",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    if not settings.stripe_enabled:
        logger.warning("Stripe is not configured; top-ups, KYC and webhooks are disabled")

    return app


app = create_app()
