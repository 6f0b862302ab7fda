import base64
import bcrypt
import hashlib
import os
from dotenv import load_dotenv

load_dotenv()

MIN_PASSWORD_LENGTH = 6
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))


def _prehash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes and rejects NUL bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash"""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
