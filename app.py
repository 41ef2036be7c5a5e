from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from slowapi import _rate_limit_exceeded_handler, errors

import config
from core_logic import logger, ObscureIdError, status_code_for
from encoding import get_generator
from limiter import limiter
from router import api_router, monitoring_router

# --- LIFESPAN AND APP SETUP ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    config.config.validate()
    if config.config.uses_default_key():
        logger.warning("OBSCURE_ID_KEY is not set; issued ids are only obscured by the public default key")

    generator = get_generator()
    logger.info(
        "Application started successfully (length=%d, prefix=%d, max_id=%d)",
        generator.config.default_length, generator.config.prefix_length, generator.max_id(),
    )
    yield
    logger.info("Application shutdown complete")

# Main app instance
app = FastAPI(
    title="Obscure ID",
    lifespan=lifespan
)

# --- MIDDLEWARE ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(errors.RateLimitExceeded, _rate_limit_exceeded_handler)

# --- APPLICATION MOUNTING ---

app.include_router(api_router)
app.include_router(monitoring_router)

# --- GLOBAL ERROR HANDLERS ---

@app.exception_handler(ObscureIdError)
async def obscure_id_exception_handler(request: Request, exc: ObscureIdError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Codec failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
