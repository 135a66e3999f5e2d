import uvicorn

from shared.core.config import settings


if __name__ == "__main__":
    try:
        uvicorn.run(
            "contract_service.app.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.RELOAD,
        )
    except KeyboardInterrupt:
        print("\nShutting down server...")
