from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

import config


class CodecOptions(BaseModel):
    """Per-call overrides shared by the encoding endpoints."""
    length: Optional[int] = Field(None, ge=config.MIN_ID_LENGTH, le=config.MAX_ID_LENGTH)
    # Pre-chosen fractions in [0, 1); pins the output for reproducible codes.
    random: Optional[List[float]] = Field(None, min_length=1, max_length=config.MAX_ID_LENGTH)

    @field_validator('random')
    def validate_random(cls, v):
        if v is not None and any(not 0 <= value < 1 for value in v):
            raise ValueError("random values must lie in [0, 1)")
        return v


class EncodeRequest(CodecOptions):
    """Request model for encoding an integer id. Bounds are checked by the codec."""
    id: StrictInt


class ObscureRequest(CodecOptions):
    """Request model for the combined entry point: ints are encoded, strings decoded."""
    value: Union[StrictInt, StrictStr]


class EncodeResponse(BaseModel):
    code: str
    id: int
    length: int


class DecodeResponse(BaseModel):
    code: str
    id: int


class ObscureResponse(BaseModel):
    result: Union[StrictInt, StrictStr]


class MaxIdResponse(BaseModel):
    length: int
    max_id: int


class FormatResponse(BaseModel):
    """Public description of the id format. Never includes the key."""
    charset: str
    default_length: int
    prefix_length: int
    max_id: int
