from core.extensions import bcrypt


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash or not password:
        return False
    return bcrypt.check_password_hash(password_hash, password)
