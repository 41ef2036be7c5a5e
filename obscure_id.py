"""
Keyed, bijective transform between positive integer ids and short opaque strings.

An encoded id is laid out as `signature + payload`. The signature holds
`prefix_length` random digits drawn per call; together with the secret key they
pick a keystream for a running-shift substitution cipher and a permutation of
the payload characters. Decoding reads the signature back and replays both
steps in reverse, so one id has many valid encodings and each of them decodes
to that id.

This is obfuscation, not encryption: enough samples reveal the structure.
"""
import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

import config
from core_logic import ConfigurationError, IdRangeError, InvalidArgumentError, PermutationError
from randomness import RandomSource, RandomSpec, default_random_function, generate_random_numbers

logger = logging.getLogger(__name__)

# Legacy option names from the JavaScript obscure-id package.
OPTION_ALIASES: Dict[str, str] = {
    "index": "charset",
    "default_id_length": "default_length",
    "signature_length": "prefix_length",
    "random_function": "random_source",
}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class ObscureIdConfig:
    key: str = config.DEFAULT_KEY
    charset: str = config.DEFAULT_CHARSET
    default_length: int = config.DEFAULT_ID_LENGTH
    prefix_length: int = config.DEFAULT_PREFIX_LENGTH
    random_source: RandomSource = field(default=default_random_function, repr=False)

    def configure(self, **options) -> "ObscureIdConfig":
        """
        Overwrites the given fields and leaves the others untouched.
        Values are not validated here; every codec operation validates first.
        """
        known = {f.name for f in fields(self)}
        for name, value in options.items():
            name = OPTION_ALIASES.get(name, name)
            if name not in known:
                raise InvalidArgumentError(f"unknown configuration option: {name!r}")
            setattr(self, name, value)
        return self

    def reset(self) -> "ObscureIdConfig":
        for f in fields(self):
            setattr(self, f.name, f.default)
        return self

    def validate(self) -> None:
        if not _is_int(self.prefix_length) or self.prefix_length < 0:
            raise ConfigurationError("invalid prefix_length")
        if not isinstance(self.charset, str) or len(self.charset) < 1:
            raise ConfigurationError("invalid charset")
        if len(set(self.charset)) != len(self.charset):
            raise ConfigurationError("charset contains duplicate characters")
        if not isinstance(self.key, str) or len(self.key) < 1:
            raise ConfigurationError("invalid key")

    @property
    def base(self) -> int:
        return len(self.charset)

    def resolve_length(self, length: Optional[int]) -> int:
        if length is None:
            length = self.default_length
        if not _is_int(length):
            raise InvalidArgumentError('"length" is not an integer')
        return length

    def payload_length(self, length: Optional[int] = None) -> int:
        payload_length = self.resolve_length(length) - self.prefix_length
        if payload_length <= 0:
            raise IdRangeError("invalid length")
        return payload_length

    def max_id(self, length: Optional[int] = None) -> int:
        """Largest id encodable at `length`; valid ids are 1..max_id inclusive."""
        self.validate()
        return self.base ** self.payload_length(length)


class ObscuredIdGenerator:
    """Encodes and decodes ids with one owned configuration."""

    def __init__(self, config: Optional[ObscureIdConfig] = None, **options):
        self.config = config if config is not None else ObscureIdConfig()
        if options:
            self.config.configure(**options)

    def configure(self, **options) -> "ObscuredIdGenerator":
        self.config.configure(**options)
        return self

    def reset_configuration(self) -> "ObscuredIdGenerator":
        self.config.reset()
        return self

    def max_id(self, length: Optional[int] = None) -> int:
        return self.config.max_id(length)

    # --- keystream ---

    def _keystream(self, signature: str, r: int) -> str:
        """Signature followed by the key rotated left by `r % len(key)`."""
        key = self.config.key
        offset = r % len(key)
        return signature + key[offset:] + key[:offset]

    def _combine(self, digits: List[int]) -> int:
        """Reads the signature digits as a little-endian number in the charset base."""
        r = 0
        for digit in reversed(digits):
            r = r * self.config.base + digit
        return r

    # --- encode ---

    async def encode(self, id: int, length: Optional[int] = None, random: RandomSpec = None) -> str:
        """
        Encodes `id` into a string of `length` characters.

        `random` overrides the configured random source for this call; passing a
        fixed sequence such as [0.3, 0.5] makes the output deterministic.
        """
        cfg = self.config
        cfg.validate()

        if not _is_int(id):
            raise InvalidArgumentError('"id" is not an integer')
        max_id = cfg.max_id(length)
        if id < 1 or id > max_id:
            raise IdRangeError("invalid id")
        if id == max_id:
            # max_id needs one digit more than the payload holds; its code decodes to 0.
            logger.warning("Encoding max_id (%d); the resulting code decodes to 0", max_id)

        payload_length = cfg.payload_length(length)
        base = cfg.base
        charset = cfg.charset

        digits = await generate_random_numbers(
            base, random if random is not None else cfg.random_source, cfg.prefix_length
        )
        signature = "".join(charset[d] for d in digits)
        r = self._combine(digits)
        keystream = self._keystream(signature, r)

        ciphered = self._substitute(id, payload_length, keystream)
        payload = self._permute(ciphered, r)

        logger.debug("Encoded id into %d characters", len(signature) + len(payload))
        return signature + payload

    generate = encode

    def _substitute(self, value: int, payload_length: int, keystream: str) -> List[str]:
        base = self.config.base
        charset = self.config.charset
        out = []
        shift = 0
        for n in range(payload_length):
            digit = (value + shift) % base
            out.append(charset[digit])
            value //= base
            shift = (shift + digit + ord(keystream[n % len(keystream)])) % base
        return out

    @staticmethod
    def _permute(chars: List[str], r: int) -> str:
        size = len(chars)
        slots: List[Optional[str]] = [None] * size
        for n, char in enumerate(chars):
            remaining = size - n
            skip = r % remaining
            r //= remaining

            for p, slot in enumerate(slots):
                if slot is None:
                    if skip == 0:
                        slots[p] = char
                        break
                    skip -= 1
            else:
                raise PermutationError("no free slot left for payload character")
        return "".join(slots)

    # --- decode ---

    def decode(self, text: str) -> int:
        """Decodes a string produced by `encode` back into its id."""
        cfg = self.config
        cfg.validate()

        if not isinstance(text, str):
            raise InvalidArgumentError('"id" is not a string')

        lookup = {char: i for i, char in enumerate(cfg.charset)}
        for char in text:
            if char not in lookup:
                raise InvalidArgumentError('"id" is invalid')

        payload_length = len(text) - cfg.prefix_length
        if payload_length <= 0:
            raise InvalidArgumentError('"id" is too short')

        signature, payload = text[:cfg.prefix_length], list(text[cfg.prefix_length:])
        r = self._combine([lookup[char] for char in signature])
        keystream = self._keystream(signature, r)

        ordered = []
        for remaining in range(payload_length, 0, -1):
            ordered.append(payload.pop(r % remaining))
            r //= remaining

        return self._unsubstitute(ordered, lookup, keystream)

    def _unsubstitute(self, chars: List[str], lookup: Dict[str, int], keystream: str) -> int:
        base = self.config.base
        out = 0
        shift = 0
        for n, char in enumerate(chars):
            digit = lookup[char]
            value = (digit - shift) % base
            out += value * base ** n
            shift = (shift + digit + ord(keystream[n % len(keystream)])) % base
        return out

    # --- dispatch ---

    async def obscure_id(self, value, length: Optional[int] = None, random: RandomSpec = None):
        """Encodes an int, decodes a str."""
        if _is_int(value):
            return await self.encode(value, length, random)
        if isinstance(value, str):
            return self.decode(value)
        raise InvalidArgumentError('"id" is not an integer or a string')

    transform = obscure_id
