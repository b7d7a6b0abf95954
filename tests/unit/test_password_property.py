"""Property-based tests for password hashing using hypothesis."""

import string

import pytest
from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from src.marketplace_auth.core.exceptions import WeakPasswordError
from src.marketplace_auth.core.security import (
    COMMON_PASSWORDS,
    DEFAULT_PASSWORD_POLICY,
    PasswordRule,
)
from tests.factories import TEST_HASHER

pytestmark = pytest.mark.unit

_lower = st.sampled_from("abcdefghijklmnopqrstuvwxyz")
_upper = st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_digit = st.sampled_from("0123456789")

# Strong passwords: at least one of each required class, padded to length >= 8
strong_password = st.builds(
    lambda upper, lower, digit, rest: upper + lower + digit + rest,
    _upper,
    _lower,
    _digit,
    st.text(alphabet=string.ascii_letters + string.digits + "!@#", min_size=5, max_size=30),
)

_FAST = settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])


@given(password=strong_password)
@_FAST
def test_hash_verify_round_trip(password: str):
    """Every password accepted by the policy verifies against its own hash."""
    hashed = TEST_HASHER.hash(password)
    assert TEST_HASHER.verify(hashed, password)


@given(password=strong_password, other=strong_password)
@_FAST
def test_verify_rejects_different_password(password: str, other: str):
    assume(password != other)
    hashed = TEST_HASHER.hash(password)
    assert not TEST_HASHER.verify(hashed, other)


@given(password=st.text(max_size=7))
@settings(max_examples=100)
def test_short_passwords_rejected(password: str):
    """Anything under eight characters is rejected, by length or by the denylist."""
    with pytest.raises(WeakPasswordError) as exc_info:
        DEFAULT_PASSWORD_POLICY.check(password)
    assert exc_info.value.rule in (PasswordRule.MIN_LENGTH, PasswordRule.COMMON)


@given(password=st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=8, max_size=30))
@settings(max_examples=100)
def test_passwords_without_uppercase_rejected(password: str):
    assume(password not in COMMON_PASSWORDS)
    with pytest.raises(WeakPasswordError) as exc_info:
        DEFAULT_PASSWORD_POLICY.check(password)
    assert exc_info.value.rule == PasswordRule.UPPERCASE


@given(common=st.sampled_from(sorted(COMMON_PASSWORDS)), data=st.data())
def test_denylist_matches_any_casing(common: str, data: st.DataObject):
    variant = "".join(
        c.upper() if data.draw(st.booleans()) else c.lower() for c in common
    )
    with pytest.raises(WeakPasswordError) as exc_info:
        DEFAULT_PASSWORD_POLICY.check(variant)
    assert exc_info.value.rule == PasswordRule.COMMON
