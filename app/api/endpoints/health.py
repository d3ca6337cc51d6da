from fastapi import APIRouter

from config import settings


def build_health_router(service_name: str) -> APIRouter:
    router = APIRouter(tags=["Health"])

    @router.get("/")
    async def root():
        """Health check endpoint"""
        return {"status": "healthy"}

    @router.get("/health")
    async def health_check_simple():
        """Simple health check endpoint for monitoring"""
        return {"status": "healthy"}

    @router.get("/api/health")
    async def health_check():
        """Detailed health check endpoint"""
        return {
            "status": "healthy",
            "service": service_name,
            "version": settings.APP_VERSION,
        }

    return router
