from fastapi import APIRouter, Request

from protrack.config import settings

router = APIRouter(tags=["Health"])


@router.get("/")
def root():
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running", "docs": "/docs"}


@router.get("/health")
def health_check(request: Request):
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "gateway_ready": getattr(request.app.state, "gateway", None) is not None,
    }
