import os
import string

# ============================================================================
# CODEC DEFAULTS
# ============================================================================

DEFAULT_KEY: str = "PleaseFillMe"
DEFAULT_CHARSET: str = string.digits + string.ascii_lowercase + string.ascii_uppercase
DEFAULT_ID_LENGTH: int = 8
DEFAULT_PREFIX_LENGTH: int = 2


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")

# ============================================================================
# CONFIGURATION CLASS
# ============================================================================

class Config:
    """Centralized configuration with validation"""
    # Codec
    OBSCURE_ID_KEY: str = os.getenv("OBSCURE_ID_KEY", DEFAULT_KEY)
    OBSCURE_ID_CHARSET: str = os.getenv("OBSCURE_ID_CHARSET", DEFAULT_CHARSET)
    OBSCURE_ID_LENGTH: int = int(os.getenv("OBSCURE_ID_LENGTH", DEFAULT_ID_LENGTH))
    OBSCURE_ID_PREFIX_LENGTH: int = int(os.getenv("OBSCURE_ID_PREFIX_LENGTH", DEFAULT_PREFIX_LENGTH))
    OBSCURE_ID_SECURE_RANDOM: bool = _env_bool("OBSCURE_ID_SECURE_RANDOM", False)

    # Bounds accepted from API callers
    MIN_ID_LENGTH: int = 3
    MAX_ID_LENGTH: int = 64

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", True)
    RATE_LIMIT_ENCODE: str = os.getenv("RATE_LIMIT_ENCODE", "120/minute")
    RATE_LIMIT_DECODE: str = os.getenv("RATE_LIMIT_DECODE", "240/minute")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str | None = os.getenv("LOG_DIR")

    @classmethod
    def validate(cls):
        """Validate configuration on startup"""
        if not cls.OBSCURE_ID_KEY:
            raise ValueError("OBSCURE_ID_KEY must not be empty")
        if not cls.OBSCURE_ID_CHARSET:
            raise ValueError("OBSCURE_ID_CHARSET must not be empty")
        if len(set(cls.OBSCURE_ID_CHARSET)) != len(cls.OBSCURE_ID_CHARSET):
            raise ValueError("OBSCURE_ID_CHARSET must not contain duplicate characters")
        if cls.OBSCURE_ID_PREFIX_LENGTH < 0:
            raise ValueError("OBSCURE_ID_PREFIX_LENGTH must not be negative")
        if not cls.MIN_ID_LENGTH <= cls.OBSCURE_ID_LENGTH <= cls.MAX_ID_LENGTH:
            raise ValueError(f"OBSCURE_ID_LENGTH must be between {cls.MIN_ID_LENGTH} and {cls.MAX_ID_LENGTH}")
        if cls.OBSCURE_ID_LENGTH <= cls.OBSCURE_ID_PREFIX_LENGTH:
            raise ValueError("OBSCURE_ID_LENGTH must be greater than OBSCURE_ID_PREFIX_LENGTH")

    @classmethod
    def uses_default_key(cls) -> bool:
        return cls.OBSCURE_ID_KEY == DEFAULT_KEY

# ============================================================================
# SINGLETON INSTANCE & DERIVED CONSTANTS
# ============================================================================

config = Config()

# --- Expose class attributes as module constants for convenience ---
for attr in [a for a in dir(config) if not a.startswith('__') and not callable(getattr(config, a))]:
    globals()[attr] = getattr(config, attr)
