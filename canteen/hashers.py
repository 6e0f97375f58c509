"""
Password hashing capability: hash(plaintext) -> digest, verify(plaintext, digest) -> bool.
Backed by Django's hasher registry; the first entry in PASSWORD_HASHERS is used for new hashes.
"""
from django.contrib.auth.hashers import BCryptPasswordHasher, check_password, make_password


class BCryptCost10PasswordHasher(BCryptPasswordHasher):
    """bcrypt with a cost factor of 10 (2**10 rounds)."""
    rounds = 10


def hash_password(plaintext):
    return make_password(plaintext)


def verify_password(plaintext, digest):
    if not digest:
        return False
    return check_password(plaintext, digest)
