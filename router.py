from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

import config
from core_logic import logger, ObscureIdError
from encoding import get_generator
from limiter import limiter
from models import (
    DecodeResponse, EncodeRequest, EncodeResponse, FormatResponse,
    MaxIdResponse, ObscureRequest, ObscureResponse,
)

# --- Router Setup ---

# API Router for versioning and organization.
api_router = APIRouter(
    prefix="/api/v1",
    tags=["IDs"],  # Group endpoints in the docs
)

# Monitoring routes live outside the versioned prefix.
monitoring_router = APIRouter(
    tags=["Monitoring"],
)

# --- API Routes ---

@api_router.post("/ids/encode", response_model=EncodeResponse, summary="Encode an integer id")
@limiter.limit(config.RATE_LIMIT_ENCODE)
async def encode(request: Request, payload: EncodeRequest):
    generator = get_generator()
    code = await generator.encode(payload.id, payload.length, payload.random)
    return EncodeResponse(code=code, id=payload.id, length=len(code))


@api_router.get("/ids/max-id", response_model=MaxIdResponse, summary="Largest id encodable at a length")
async def max_id(length: Optional[int] = Query(None, ge=config.MIN_ID_LENGTH, le=config.MAX_ID_LENGTH)):
    generator = get_generator()
    resolved = length if length is not None else generator.config.default_length
    return MaxIdResponse(length=resolved, max_id=generator.max_id(resolved))


@api_router.get("/ids/format", response_model=FormatResponse, summary="Describe the public id format")
async def id_format():
    generator = get_generator()
    return FormatResponse(
        charset=generator.config.charset,
        default_length=generator.config.default_length,
        prefix_length=generator.config.prefix_length,
        max_id=generator.max_id(),
    )


@api_router.post("/ids/obscure", response_model=ObscureResponse, summary="Encode an int or decode a string")
@limiter.limit(config.RATE_LIMIT_ENCODE)
async def obscure(request: Request, payload: ObscureRequest):
    result = await get_generator().obscure_id(payload.value, payload.length, payload.random)
    return ObscureResponse(result=result)


@api_router.get("/ids/decode/{code}", response_model=DecodeResponse, summary="Decode a string back into its id")
@limiter.limit(config.RATE_LIMIT_DECODE)
async def decode(request: Request, code: str):
    return DecodeResponse(code=code, id=get_generator().decode(code))

# --- Monitoring Routes ---

@monitoring_router.get("/health", summary="Health Check")
async def health_check():
    """Checks that the configured generator can encode and decode."""
    health_status = {"status": "ok", "services": {}}
    try:
        generator = get_generator()
        code = await generator.encode(1)
        if generator.decode(code) != 1:
            raise ObscureIdError("round trip mismatch")
        health_status["services"]["codec"] = "ok"
    except ObscureIdError as e:
        logger.error(f"Codec health check failed: {e}")
        health_status["services"]["codec"] = "error"
        health_status["status"] = "error"

    status_code = 200 if health_status["status"] == "ok" else 503
    return JSONResponse(content=health_status, status_code=status_code)
