"""
FastAPI Application Entry Point
Main application setup and route registration
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import settings
from app.database import connect_db, disconnect_db
from app.logging_config import get_logger, setup_logging

setup_logging(settings.LOG_LEVEL)
logger = get_logger("APP")
api_logger = get_logger("API")


class NoCacheMiddleware(BaseHTTPMiddleware):
    """Prevent browser from caching HTML pages"""
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        ct = response.headers.get("content-type", "")
        if "text/html" in ct:
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log every API call with its status and duration"""
    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        started = time.perf_counter()
        response: Response = await call_next(request)
        data = {
            "status": response.status_code,
            "durationMs": round((time.perf_counter() - started) * 1000, 1),
        }
        message = f"{request.method} {request.url.path}"
        if response.status_code >= 500:
            api_logger.error(message, extra={"data": data})
        elif response.status_code >= 400:
            api_logger.warning(message, extra={"data": data})
        else:
            api_logger.info(message, extra={"data": data})
        return response


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Event certificate issuing and verification",
    version="1.0.0",
    debug=settings.DEBUG
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.APP_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# No-cache middleware for HTML pages
app.add_middleware(NoCacheMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Unexpected failures are logged and reported without internals"""
    logger.error("Unhandled error", extra={"data": {
        "method": request.method,
        "path": request.url.path,
        "error": str(exc),
    }})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Startup event
@app.on_event("startup")
async def startup():
    """Run on application startup"""
    await connect_db()
    logger.info(f"{settings.APP_NAME} started in {settings.APP_ENV} mode")


# Shutdown event
@app.on_event("shutdown")
async def shutdown():
    """Run on application shutdown"""
    await disconnect_db()
    logger.info("Shutdown complete")


@app.get("/", response_class=HTMLResponse)
async def home_page():
    """Landing page pointing at certificate verification"""
    return f"""<!DOCTYPE html>
<html><head><meta charset="UTF-8"><title>{settings.APP_NAME}</title></head>
<body style="font-family:'Segoe UI',sans-serif;text-align:center;padding-top:4rem;">
<h1>{settings.APP_NAME}</h1>
<p>Scan the QR code on a certificate or open /verify/&lt;certificate number&gt; to check it.</p>
</body></html>"""


# Import and include routers
from app.routes import auth, admin, public

app.include_router(auth.router, prefix="/api/admin", tags=["Authentication"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(public.router, tags=["Public"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True  # Auto-reload on code changes
    )
