"""Application entry point.

Runs the FastAPI app with uvicorn on the configured host and port.
"""

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=True)
