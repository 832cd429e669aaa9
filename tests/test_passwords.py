import pytest

from cinelog.auth.passwords import hash_password, verify_password


def test_hash_is_not_plaintext_and_verifies():
    h = hash_password("secret")
    assert h != "secret"
    assert "secret" not in h
    assert verify_password(h, "secret")


def test_verify_rejects_other_passwords():
    h = hash_password("secret")
    assert not verify_password(h, "Secret")
    assert not verify_password(h, "secret ")
    assert not verify_password(h, "")


def test_hashes_are_salted():
    assert hash_password("secret") != hash_password("secret")


def test_empty_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        hash_password("")


def test_garbage_hash_never_verifies():
    assert not verify_password("not-an-argon2-hash", "secret")
    assert not verify_password("", "secret")
