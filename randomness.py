"""
Sources of per-call randomness for the id codec.

A random source is any callable returning a float in [0, 1), either directly or
as an awaitable. A literal sequence of such floats may be passed instead, which
is how tests pin the output of an encode call.
"""
import asyncio
import inspect
import random
import secrets
from numbers import Real
from typing import Any, Awaitable, Callable, List, Sequence, Union

from core_logic import InvalidArgumentError

RandomSource = Callable[[], Union[float, Awaitable[float]]]
RandomSpec = Union[None, RandomSource, Sequence[float]]

_system_random = secrets.SystemRandom()


async def default_random_function() -> float:
    """Uniform draw from the module-level PRNG."""
    return random.random()


async def secure_random_function() -> float:
    """Uniform draw backed by the operating system's entropy pool."""
    return _system_random.random()


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _invoke(source: RandomSource, count: int) -> List[Any]:
    """Calls `source` `count` times; coroutines already created are closed if a later call fails."""
    draws: List[Any] = []
    try:
        for _ in range(count):
            draws.append(source())
    except BaseException:
        for draw in draws:
            if inspect.iscoroutine(draw):
                draw.close()
        raise
    return draws


def _scale(value: Any, base: int) -> int:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(f'"random" produced a non-numeric value: {value!r}')
    if not 0 <= value < 1:
        raise InvalidArgumentError(f'"random" produced a value outside [0, 1): {value!r}')
    return int(value * base)


async def generate_random_numbers(base: int, random: RandomSpec = None, count: int = 2) -> List[int]:
    """
    Draws `count` digits, each uniformly distributed over [0, base).

    `random` is either None (use the default generator), a random source invoked
    `count` times, or a sequence holding at least `count` pre-chosen fractions.
    All draws are requested before any is awaited.
    """
    if random is None:
        draws = _invoke(default_random_function, count)
    elif callable(random):
        draws = _invoke(random, count)
    elif isinstance(random, Sequence) and not isinstance(random, (str, bytes)):
        if len(random) < count:
            raise InvalidArgumentError(f'"random" needs at least {count} values, got {len(random)}')
        draws = list(random[:count])
    else:
        raise InvalidArgumentError('"random" is not valid')

    results = await asyncio.gather(*(_resolve(draw) for draw in draws))
    return [_scale(value, base) for value in results]
