"""
Process-wide default generator for turning database IDs into short,
non-sequential, reversible strings. Everything else in the service goes through
these helpers instead of building its own generator.
"""
from functools import lru_cache
from typing import Optional, Union

import config
from obscure_id import ObscuredIdGenerator
from randomness import RandomSpec, default_random_function, secure_random_function


@lru_cache()
def get_generator() -> ObscuredIdGenerator:
    """
    Returns a cached, singleton generator built from the environment settings.
    """
    settings = config.config
    return ObscuredIdGenerator(
        key=settings.OBSCURE_ID_KEY,
        charset=settings.OBSCURE_ID_CHARSET,
        default_length=settings.OBSCURE_ID_LENGTH,
        prefix_length=settings.OBSCURE_ID_PREFIX_LENGTH,
        random_source=secure_random_function if settings.OBSCURE_ID_SECURE_RANDOM else default_random_function,
    )


async def encode_id(n: int, length: Optional[int] = None, random: RandomSpec = None) -> str:
    """Encodes a single integer ID into a short, non-sequential string."""
    return await get_generator().encode(n, length, random)


def decode_id(s: str) -> int:
    """Decodes a short string back into an integer ID."""
    return get_generator().decode(s)


async def obscure_id(value: Union[int, str], length: Optional[int] = None, random: RandomSpec = None) -> Union[int, str]:
    return await get_generator().obscure_id(value, length, random)


def configure(**options) -> ObscuredIdGenerator:
    return get_generator().configure(**options)


def reset_configuration() -> ObscuredIdGenerator:
    """Drops runtime overrides; the next call rebuilds from the environment."""
    get_generator.cache_clear()
    return get_generator()


def max_id(length: Optional[int] = None) -> int:
    return get_generator().max_id(length)
