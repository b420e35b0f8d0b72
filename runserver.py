#project.runserver.py

import uvicorn

from src.storefront.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "src.storefront.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.MODE == "development",
        workers=None if settings.MODE == "development" else settings.WORKERS,
    )
