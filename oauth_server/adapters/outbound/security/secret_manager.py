# oauth_server/adapters/outbound/security/secret_manager.py

import secrets

from passlib.context import CryptContext

# 20 random bytes, hex encoded
SECRET_BYTES = 20


class ClientSecretManager:
    """
    Hashing and random generation of client secrets.

    Satisfies the SecretHasher protocol of the client domain model.
    """

    crypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @classmethod
    def generate_secret(cls) -> str:
        """
        Create a strong random secret (40 hex characters) for a confidential client.
        """
        return secrets.token_hex(SECRET_BYTES)

    @classmethod
    def hash_secret(cls, secret: str) -> str:
        """
        Generate secure salted hash for storage in the database.
        """
        return cls.crypt_context.hash(secret)

    @classmethod
    def verify_secret(cls, plain_secret: str, hashed_secret: str) -> bool:
        """
        Compare plain text secret with stored hash.

        Malformed or empty hashes never verify.
        """
        if not plain_secret or not hashed_secret:
            return False
        try:
            return cls.crypt_context.verify(plain_secret, hashed_secret)
        except ValueError:
            return False
