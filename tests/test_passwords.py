import pytest

from app.core.config import settings
from app.services.passwords import PasswordGuard


guard = PasswordGuard(rounds=4)


def test_hash_is_not_plaintext_and_salted():
    first = guard.hash("hunter2")
    second = guard.hash("hunter2")
    assert "hunter2" not in first
    assert first != second
    assert first.startswith("$2")


def test_verify_accepts_only_the_same_password():
    hashed = guard.hash("correct horse")
    assert guard.verify("correct horse", hashed)
    assert not guard.verify("correct horse ", hashed)
    assert not guard.verify("Correct horse", hashed)


def test_rounds_are_encoded_in_hash():
    assert PasswordGuard(rounds=5).hash("x").split("$")[2] == "05"


def test_long_passwords_are_consistent():
    password = "p" * 100
    hashed = guard.hash(password)
    assert guard.verify(password, hashed)


def test_explicit_rounds_are_not_replaced_by_the_default():
    assert PasswordGuard().rounds == settings.PASSWORD_HASH_ROUNDS
    assert PasswordGuard(rounds=0).rounds == 0
    with pytest.raises(ValueError):
        PasswordGuard(rounds=0).hash("x")
