import asyncio
import logging
import os
import random
import sys

import pytest

# Add the project root to sys.path to resolve module imports correctly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import DEFAULT_CHARSET, DEFAULT_KEY
from core_logic import ConfigurationError, IdRangeError, InvalidArgumentError, ObscureIdError
from obscure_id import ObscureIdConfig, ObscuredIdGenerator


MAX_ID_LENGTH_8 = 56800235584


@pytest.fixture
def generator():
    return ObscuredIdGenerator()


def encode(generator, *args, **kwargs):
    return asyncio.run(generator.encode(*args, **kwargs))


def obscure(generator, *args, **kwargs):
    return asyncio.run(generator.obscure_id(*args, **kwargs))


# ===================================
# 1. Reference Fixtures
# ===================================

def test_known_encoding(generator):
    assert encode(generator, 19, 8, [0.3, 0.5]) == "ivUVjy0Q"


def test_known_decoding(generator):
    assert generator.decode("ivUVjy0Q") == 19


def test_default_max_id(generator):
    assert generator.max_id() == MAX_ID_LENGTH_8 == 62 ** 6


def test_max_id_is_encodable_but_wraps_to_zero(generator, caplog):
    # max_id needs one more digit than the payload holds, so its code decodes to 0.
    with caplog.at_level(logging.WARNING, logger="obscure_id"):
        result = encode(generator, MAX_ID_LENGTH_8)
    assert isinstance(result, str)
    assert len(result) == 8
    assert generator.decode(result) == 0
    assert "decodes to 0" in caplog.text


def test_max_id_wraps_in_small_base():
    generator = ObscuredIdGenerator(charset="0123456789")
    code = encode(generator, 10, 3, [0.3, 0.5])
    assert len(code) == 3
    assert generator.decode(code) == 0
    assert generator.decode(encode(generator, 9, 3, [0.3, 0.5])) == 9


def test_id_above_max_is_rejected(generator):
    with pytest.raises(IdRangeError):
        encode(generator, MAX_ID_LENGTH_8 + 1)


def test_default_output_length(generator):
    result = obscure(generator, 19)
    assert isinstance(result, str)
    assert len(result) == 8


# ===================================
# 2. Codec Properties
# ===================================

def test_round_trip_across_ids_and_randomness(generator):
    rng = random.Random(1234)
    for length in (3, 5, 8, 12):
        upper = generator.max_id(length)
        for _ in range(50):
            n = rng.randint(1, upper - 1)
            code = encode(generator, n, length, [rng.random(), rng.random()])
            assert len(code) == length
            assert generator.decode(code) == n


def test_round_trip_at_bounds(generator):
    for n in (1, 2, 61, 62, 63, MAX_ID_LENGTH_8 - 1):
        assert generator.decode(encode(generator, n)) == n


def test_deterministic_for_fixed_randomness(generator):
    first = encode(generator, 4242, 10, [0.1, 0.9])
    second = encode(generator, 4242, 10, [0.1, 0.9])
    assert first == second


def test_same_id_has_many_encodings(generator):
    pairs = [[0.0, 0.0], [0.3, 0.5], [0.5, 0.3], [0.99, 0.01], [0.42, 0.42]]
    codes = {encode(generator, 19, 8, pair) for pair in pairs}
    assert len(codes) == len(pairs)
    assert all(generator.decode(code) == 19 for code in codes)


def test_signature_is_drawn_from_randomness(generator):
    code = encode(generator, 19, 8, [0.3, 0.5])
    assert code[:2] == DEFAULT_CHARSET[18] + DEFAULT_CHARSET[31]


def test_output_stays_inside_charset():
    generator = ObscuredIdGenerator(charset="abcdefgh", key="s3cr3t")
    for n in range(1, 200):
        code = encode(generator, n, 6)
        assert set(code) <= set("abcdefgh")
        assert generator.decode(code) == n


def test_sequential_ids_do_not_look_sequential(generator):
    codes = [encode(generator, n, 8, [0.3, 0.5]) for n in range(1, 6)]
    # Same signature, but the payloads differ in more than the last character.
    payloads = [code[2:] for code in codes]
    assert len(set(payloads)) == 5
    assert any(sum(a != b for a, b in zip(x, y)) > 1 for x, y in zip(payloads, payloads[1:]))


def test_key_changes_output():
    a = ObscuredIdGenerator(key="first-key")
    b = ObscuredIdGenerator(key="second-key")
    assert encode(a, 123456, 8, [0.2, 0.7]) != encode(b, 123456, 8, [0.2, 0.7])


# ===================================
# 3. Bounds and Input Validation
# ===================================

@pytest.mark.parametrize("bad_id", [0, -1, -MAX_ID_LENGTH_8])
def test_non_positive_ids_are_rejected(generator, bad_id):
    with pytest.raises(IdRangeError):
        encode(generator, bad_id)


@pytest.mark.parametrize("bad_id", [1.5, "19", None, True])
def test_encode_rejects_non_integers(generator, bad_id):
    with pytest.raises(InvalidArgumentError):
        encode(generator, bad_id)


def test_max_id_formula():
    generator = ObscuredIdGenerator(charset="0123456789", prefix_length=2)
    assert generator.max_id(5) == 10 ** 3
    assert generator.max_id(3) == 10


@pytest.mark.parametrize("length", [2, 1, 0, -4])
def test_length_must_exceed_prefix(generator, length):
    with pytest.raises(IdRangeError):
        generator.max_id(length)
    with pytest.raises(IdRangeError):
        encode(generator, 1, length)


def test_length_must_be_integer(generator):
    with pytest.raises(InvalidArgumentError):
        generator.max_id("8")


def test_decode_rejects_foreign_characters(generator):
    with pytest.raises(InvalidArgumentError):
        generator.decode("this is invalid")


def test_decode_rejects_non_strings(generator):
    with pytest.raises(InvalidArgumentError):
        generator.decode(19)


def test_decode_rejects_strings_without_payload(generator):
    with pytest.raises(InvalidArgumentError):
        generator.decode("ab")


def test_errors_keep_builtin_categories(generator):
    with pytest.raises(TypeError):
        generator.decode("not-valid!")
    with pytest.raises(ValueError):
        encode(generator, 0)


# ===================================
# 4. Dispatcher
# ===================================

def test_dispatcher_routes_by_type(generator):
    code = obscure(generator, 19, 8, [0.3, 0.5])
    assert code == "ivUVjy0Q"
    assert obscure(generator, code) == 19
    assert asyncio.run(generator.transform("ivUVjy0Q")) == 19


@pytest.mark.parametrize("value", [None, 1.0, b"ivUVjy0Q", [19], False])
def test_dispatcher_rejects_other_types(generator, value):
    with pytest.raises(InvalidArgumentError):
        obscure(generator, value)


# ===================================
# 5. Configuration
# ===================================

def test_configure_default_length(generator):
    generator.configure(default_length=11)
    result = obscure(generator, 19)
    assert len(result) == 11
    assert generator.decode(result) == 19


def test_constructor_options():
    generator = ObscuredIdGenerator(default_length=12)
    result = asyncio.run(generator.generate(19))
    assert len(result) == 12


def test_configured_async_random_source(generator):
    values = [0.3, 0.5]

    async def random_source():
        return values.pop(0)

    generator.configure(random_source=random_source)
    assert obscure(generator, 19) == "ivUVjy0Q"


def test_configured_sync_random_source(generator):
    values = iter([0.3, 0.5])
    generator.configure(random_source=lambda: next(values))
    assert obscure(generator, 19) == "ivUVjy0Q"


def test_call_randomness_overrides_configured_source(generator):
    def broken_source():
        raise AssertionError("configured source must not be used")

    generator.configure(random_source=broken_source)
    assert encode(generator, 19, 8, [0.3, 0.5]) == "ivUVjy0Q"


def test_configure_is_partial_and_chains(generator):
    assert generator.configure(key="abc") is generator
    assert generator.config.key == "abc"
    assert generator.config.charset == DEFAULT_CHARSET
    assert generator.config.default_length == 8


def test_configure_accepts_legacy_option_names(generator):
    generator.configure(index="0123456789", default_id_length=6, signature_length=2)
    assert generator.config.charset == "0123456789"
    assert generator.config.default_length == 6
    assert generator.max_id() == 10 ** 4


def test_configure_rejects_unknown_options(generator):
    with pytest.raises(InvalidArgumentError):
        generator.configure(salt="pepper")


def test_reset_configuration(generator):
    generator.configure(key="x", charset="ab", default_length=20, prefix_length=1)
    assert generator.reset_configuration() is generator
    assert generator.config == ObscureIdConfig()
    assert generator.config.key == DEFAULT_KEY
    assert encode(generator, 19, 8, [0.3, 0.5]) == "ivUVjy0Q"


def test_generators_do_not_share_configuration():
    a = ObscuredIdGenerator()
    b = ObscuredIdGenerator()
    a.configure(default_length=16)
    assert b.config.default_length == 8


@pytest.mark.parametrize("options", [
    {"key": ""},
    {"charset": ""},
    {"charset": "aabc"},
    {"prefix_length": -1},
])
def test_invalid_configuration_fails_every_operation(generator, options):
    # Configure itself never validates.
    generator.configure(**options)
    with pytest.raises(ConfigurationError):
        generator.max_id()
    with pytest.raises(ConfigurationError):
        encode(generator, 1)
    with pytest.raises(ConfigurationError):
        generator.decode("00000000")


def test_configuration_error_is_a_range_error():
    assert issubclass(ConfigurationError, IdRangeError)
    assert issubclass(ConfigurationError, ObscureIdError)


# ===================================
# 6. Signature Length
# ===================================

def test_zero_prefix_has_no_signature():
    generator = ObscuredIdGenerator(prefix_length=0)
    assert generator.max_id(4) == 62 ** 4
    code = encode(generator, 777, 4)
    assert len(code) == 4
    assert generator.decode(code) == 777
    # Nothing random is left, so every call agrees.
    assert encode(generator, 777, 4) == code


def test_longer_prefix_round_trips():
    generator = ObscuredIdGenerator(prefix_length=3)
    code = encode(generator, 19, 9, [0.3, 0.5, 0.7])
    assert len(code) == 9
    assert code[:3] == DEFAULT_CHARSET[18] + DEFAULT_CHARSET[31] + DEFAULT_CHARSET[43]
    assert generator.decode(code) == 19


def test_longer_prefix_needs_enough_random_values():
    generator = ObscuredIdGenerator(prefix_length=3)
    with pytest.raises(InvalidArgumentError):
        encode(generator, 19, 9, [0.3, 0.5])


def test_single_character_prefix():
    generator = ObscuredIdGenerator(prefix_length=1, charset="0123456789abcdef")
    for n in (1, 15, 16, 4095):
        code = encode(generator, n, 4)
        assert generator.decode(code) == n


# ===================================
# 7. Permutation
# ===================================

def test_permutation_with_zero_selector_keeps_order():
    assert ObscuredIdGenerator._permute(list("abcdef"), 0) == "abcdef"


def test_permutation_covers_every_ordering():
    orderings = {ObscuredIdGenerator._permute(list("abcd"), r) for r in range(24)}
    assert len(orderings) == 24
