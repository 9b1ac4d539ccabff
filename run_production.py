import uvicorn

from college_api.config import settings

if __name__ == "__main__":
    # Production configuration
    uvicorn.run(
        "college_api.main:app",
        host="0.0.0.0",  # Allow connections from any IP
        port=8000,
        reload=False,    # Disable reload in production
        workers=1,       # Single worker for SQLite
        log_level=settings.log_level.lower(),
        access_log=True
    )
