"""Password hashing for user accounts (Argon2 via pwdlib)."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)


def check_login_password(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a login attempt and return a replacement hash when the stored one is outdated.

    The second item is None unless the stored hash used older parameters or
    another algorithm; callers store it so accounts migrate on next login.
    """
    return password_hash.verify_and_update(plain_password, hashed_password)
