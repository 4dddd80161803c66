"""Health check routes."""
from fastapi import APIRouter


router = APIRouter(tags=["Health"])


@router.get("/")
def root():
    """Root endpoint."""
    return {"message": "Freebet Planner API", "version": "1.0.0"}


@router.get("/health")
def health_check():
    """Simple health check endpoint."""
    return {"status": "healthy"}
