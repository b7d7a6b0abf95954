"""Tests for the password policy and Argon2 hasher."""

import pytest

from src.marketplace_auth.core.exceptions import WeakPasswordError
from src.marketplace_auth.core.security import (
    COMMON_PASSWORDS,
    DEFAULT_PASSWORD_POLICY,
    PasswordHasher,
    PasswordPolicy,
    PasswordRule,
)

pytestmark = pytest.mark.unit


class TestPasswordPolicy:
    """Each rule is reported individually."""

    @pytest.mark.parametrize(
        ("password", "rule"),
        [
            ("password", PasswordRule.COMMON),
            ("PASSWORD123", PasswordRule.COMMON),
            ("TrustNo1", PasswordRule.COMMON),
            ("short1A", PasswordRule.MIN_LENGTH),
            ("alllower1", PasswordRule.UPPERCASE),
            ("ALLUPPER1", PasswordRule.LOWERCASE),
            ("NoDigitsHere", PasswordRule.DIGIT),
        ],
    )
    def test_rejects_with_violated_rule(self, password: str, rule: PasswordRule):
        with pytest.raises(WeakPasswordError) as exc_info:
            DEFAULT_PASSWORD_POLICY.check(password)
        assert exc_info.value.rule == rule
        assert exc_info.value.code == "WEAK_PASSWORD"
        assert exc_info.value.status_code == 400

    def test_accepts_strong_password(self):
        DEFAULT_PASSWORD_POLICY.check("Passw0rd")

    def test_special_character_not_required_by_default(self):
        assert DEFAULT_PASSWORD_POLICY.require_special is False
        DEFAULT_PASSWORD_POLICY.check("Abcdefg1")

    def test_alternative_policy_requires_special(self):
        policy = PasswordPolicy(min_length=10, require_special=True)
        with pytest.raises(WeakPasswordError) as exc_info:
            policy.check("Abcdefghi1")
        assert exc_info.value.rule == PasswordRule.SPECIAL
        policy.check("Abcdefgh1!")

    def test_denylist_is_case_insensitive_exact_match(self):
        assert "qwerty123" in COMMON_PASSWORDS
        with pytest.raises(WeakPasswordError):
            DEFAULT_PASSWORD_POLICY.check("QWERTY123")
        # Containing a common password is fine
        DEFAULT_PASSWORD_POLICY.check("Qwerty123Extra")


class TestPasswordHasher:
    def test_hash_and_verify(self, hasher: PasswordHasher):
        hashed = hasher.hash("Passw0rd")
        assert hashed != "Passw0rd"
        assert hashed.startswith("$argon2id$")
        assert hasher.verify(hashed, "Passw0rd") is True

    def test_verify_wrong_password(self, hasher: PasswordHasher):
        hashed = hasher.hash("Passw0rd")
        assert hasher.verify(hashed, "Passw0rd!") is False
        assert hasher.verify(hashed, "passw0rd") is False

    def test_hashes_are_salted(self, hasher: PasswordHasher):
        assert hasher.hash("Passw0rd") != hasher.hash("Passw0rd")

    def test_hash_rejects_weak_password(self, hasher: PasswordHasher):
        with pytest.raises(WeakPasswordError) as exc_info:
            hasher.hash("short1A")
        assert exc_info.value.rule == PasswordRule.MIN_LENGTH

    def test_verify_malformed_hash_returns_false(self, hasher: PasswordHasher):
        assert hasher.verify("not-a-hash", "Passw0rd") is False
        assert hasher.verify("", "Passw0rd") is False

    def test_dummy_hash_never_matches_user_input(self, hasher: PasswordHasher):
        assert hasher.verify(hasher.dummy_hash, "Passw0rd") is False
