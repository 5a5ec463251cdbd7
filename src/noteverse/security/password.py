"""Password hashing utilities."""

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256 so long passwords are not truncated at 72 bytes.
# Cost 10 keeps login latency in line with the existing account hashes; cheaper
# hashes are flagged by needs_update and rehashed on the next login.
pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__rounds=10,
    bcrypt_sha256__min_rounds=10,
)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Unrecognised hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def needs_update(hashed_password: str) -> bool:
    """Check if password hash needs updating."""
    return pwd_context.needs_update(hashed_password)
