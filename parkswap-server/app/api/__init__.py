from fastapi import APIRouter

from app.interfaces.http.routers import auth, history, kyc, profile, spots, vehicles, wallet, webhooks


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(profile.router, tags=["profile"])
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    router.include_router(kyc.router, prefix="/kyc", tags=["kyc"])
    router.include_router(spots.router, prefix="/spots", tags=["spots"])
    router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
    router.include_router(history.router, prefix="/history", tags=["history"])
    router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
    return router


__all__ = [
    "create_api_router",
]
