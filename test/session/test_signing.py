import base64

import pytest

from session.errors import ConfigurationError, CookieMalformed, SignatureMismatch, VerificationError
from session.signing import BASE64_DIGEST_LEN, SigningKey, SigningKeySet, sign, verify

from helpers import OTHER_SECRET, SECRET

THIRD_SECRET = b"x" * 64


@pytest.mark.parametrize("raw_value", [
    "",
    "a",
    "session-token",
    "Zm9vYmFy+/==",
    "ünïcödé value",
    "x" * 4096,
])
def test_sign_then_verify_returns_raw_value(raw_value):
    keys = SigningKeySet(SECRET)
    signed = sign(raw_value, keys.primary)

    assert len(signed) == BASE64_DIGEST_LEN + len(raw_value)
    assert signed.endswith(raw_value)
    assert verify(signed, keys) == raw_value


def test_digest_prefix_is_base64_of_hmac_sha256():
    keys = SigningKeySet(SECRET)
    signed = sign("value", keys.primary)

    digest = base64.b64decode(signed[:BASE64_DIGEST_LEN])
    assert len(digest) == 32
    assert BASE64_DIGEST_LEN == 44


def test_sign_is_deterministic():
    key = SigningKey(SECRET)
    assert sign("value", key) == sign("value", key)


def test_only_first_32_bytes_of_master_key_sign():
    # Keys sharing the first 32 bytes sign identically
    assert sign("value", SigningKey(b"a" * 32 + b"b" * 32)) == sign("value", SigningKey(b"a" * 32 + b"c" * 40))


def test_different_keys_produce_different_digests():
    assert sign("value", SigningKey(SECRET)) != sign("value", SigningKey(OTHER_SECRET))


def test_fallback_key_verifies_old_cookie():
    old_cookie = sign("token", SigningKey(OTHER_SECRET))

    keys = SigningKeySet(SECRET, [OTHER_SECRET])
    assert verify(old_cookie, keys) == "token"


def test_fallback_keys_tried_in_order_after_primary():
    old_cookie = sign("token", SigningKey(THIRD_SECRET))

    keys = SigningKeySet(SECRET, [OTHER_SECRET, THIRD_SECRET])
    assert verify(old_cookie, keys) == "token"


def test_removed_fallback_key_no_longer_verifies():
    old_cookie = sign("token", SigningKey(OTHER_SECRET))

    with pytest.raises(SignatureMismatch):
        verify(old_cookie, SigningKeySet(SECRET))


def test_fallback_key_is_never_used_for_signing():
    keys = SigningKeySet(SECRET, [OTHER_SECRET])
    assert sign("token", keys.primary) == sign("token", SigningKey(SECRET))


@pytest.mark.parametrize("length", range(0, BASE64_DIGEST_LEN))
def test_short_values_are_malformed(length):
    with pytest.raises(CookieMalformed):
        verify("A" * length, SigningKeySet(SECRET))


def test_invalid_base64_prefix_is_malformed():
    value = "!" * BASE64_DIGEST_LEN + "token"
    with pytest.raises(CookieMalformed):
        verify(value, SigningKeySet(SECRET))


def test_non_ascii_prefix_is_malformed():
    value = "é" * BASE64_DIGEST_LEN + "token"
    with pytest.raises(CookieMalformed):
        verify(value, SigningKeySet(SECRET))


def test_tampering_with_digest_fails():
    keys = SigningKeySet(SECRET)
    signed = sign("token", keys.primary)
    digest = base64.b64decode(signed[:BASE64_DIGEST_LEN])

    for index in range(len(digest)):
        flipped = bytearray(digest)
        flipped[index] ^= 0x01
        tampered = base64.b64encode(bytes(flipped)).decode("ascii") + "token"
        with pytest.raises(SignatureMismatch):
            verify(tampered, keys)


def test_tampering_with_digest_characters_fails():
    keys = SigningKeySet(SECRET)
    signed = sign("token", keys.primary)

    # The 43rd character also carries padding bits, so only fully significant characters are swapped
    for index in range(BASE64_DIGEST_LEN - 2):
        replacement = "A" if signed[index] != "A" else "B"
        tampered = signed[:index] + replacement + signed[index + 1:]
        with pytest.raises(VerificationError):
            verify(tampered, keys)


def test_tampering_with_value_fails():
    keys = SigningKeySet(SECRET)
    signed = sign("session-token", keys.primary)

    for index in range(BASE64_DIGEST_LEN, len(signed)):
        replacement = "x" if signed[index] != "x" else "y"
        tampered = signed[:index] + replacement + signed[index + 1:]
        with pytest.raises(SignatureMismatch):
            verify(tampered, keys)


def test_appending_to_value_fails():
    keys = SigningKeySet(SECRET)
    with pytest.raises(SignatureMismatch):
        verify(sign("token", keys.primary) + "extra", keys)


@pytest.mark.parametrize("secret", [b"", b"short", b"x" * 63, "y" * 10])
def test_short_secret_is_rejected(secret):
    with pytest.raises(ConfigurationError, match="invalid key length"):
        SigningKey(secret)


def test_short_fallback_secret_is_rejected():
    with pytest.raises(ConfigurationError):
        SigningKeySet(SECRET, [b"short"])


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        SigningKeySet(b"short")


def test_str_secret_is_accepted():
    key = SigningKey(SECRET.decode("ascii"))
    assert key == SigningKey(SECRET)


def test_rotate_keeps_old_primary_as_first_fallback():
    keys = SigningKeySet(SECRET).rotate(OTHER_SECRET)

    assert keys.primary == SigningKey(OTHER_SECRET)
    assert list(keys.fallbacks) == [SigningKey(SECRET)]
    assert len(keys) == 2
    assert verify(sign("token", SigningKey(SECRET)), keys) == "token"


def test_with_fallback_appends():
    keys = SigningKeySet(SECRET, [OTHER_SECRET]).with_fallback(THIRD_SECRET)
    assert list(keys.fallbacks) == [SigningKey(OTHER_SECRET), SigningKey(THIRD_SECRET)]


def test_repr_hides_key_material():
    keys = SigningKeySet(SECRET, [OTHER_SECRET])
    assert "secret" not in repr(keys)
    assert "secret" not in repr(keys.primary)
