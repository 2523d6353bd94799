'''
Password hashing, kept apart from services/security.py so that the user
service can hash passwords without a circular import.
'''
from passlib.context import CryptContext

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


class HashedPassword:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        return cls.pwd_context.verify(plain_password, hashed_password)

    @classmethod
    def get_hash(cls, password: str) -> str:
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Passwords cannot be longer than {MAX_PASSWORD_BYTES} bytes.")
        return cls.pwd_context.hash(password)
