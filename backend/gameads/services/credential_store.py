"""Credential store for the single admin account."""

import logging
import re
import secrets

import argon2
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gameads.core import settings
from gameads.models.admin_account import (
    PASSWORD_SCHEME_ARGON2,
    PASSWORD_SCHEME_PLAINTEXT,
    AdminAccount,
)
from gameads.services.errors import ServerError

logger = logging.getLogger(__name__)

# Argon2 password hasher with recommended parameters
# Memory: 64 MiB, Time: 3 iterations, Parallelism: 4
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"

_PASSWORD_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("one uppercase letter", re.compile(r"[A-Z]")),
    ("one lowercase letter", re.compile(r"[a-z]")),
    ("one number", re.compile(r"\d")),
    (
        f"one special character ({PASSWORD_SPECIAL_CHARACTERS})",
        re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]"),
    ),
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison."""
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the stored hash was made with weaker parameters."""
    return ph.check_needs_rehash(password_hash)


def is_argon2_hash(value: str) -> bool:
    try:
        argon2.extract_parameters(value)
    except InvalidHashError:
        return False
    return True


def is_hashed(account: AdminAccount) -> bool:
    """Whether the stored credential is a hash (as opposed to legacy plaintext)."""
    return account.password_scheme == PASSWORD_SCHEME_ARGON2


def validate_password_strength(password: str) -> list[str]:
    """Return the list of unmet password rules (empty when the password is acceptable)."""
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    for description, pattern in _PASSWORD_RULES:
        if not pattern.search(password):
            problems.append(description)
    return problems


class CredentialStore:
    """Read/write access to the admin account row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_account(self) -> AdminAccount | None:
        result = await self.db.execute(
            select(AdminAccount).order_by(AdminAccount.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> AdminAccount | None:
        """Look up the account by email, ignoring case."""
        result = await self.db.execute(
            select(AdminAccount).where(func.lower(AdminAccount.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_or_create_account(self) -> AdminAccount:
        """Return the admin account, seeding it from settings on first access."""
        account = await self.get_account()
        if account is not None:
            return account

        account = AdminAccount(
            username=settings.admin_username,
            email=settings.admin_email,
            password_hash=self._seed_password_hash(),
            password_scheme=PASSWORD_SCHEME_ARGON2,
        )
        self.db.add(account)
        await self.save(account)
        logger.info(f"Created admin account: {account.username} <{account.email}>")
        return account

    def _seed_password_hash(self) -> str:
        if settings.admin_password_hash is not None:
            configured_hash = settings.admin_password_hash.get_secret_value()
            if not is_argon2_hash(configured_hash):
                raise ServerError("ADMIN_PASSWORD_HASH is not a valid Argon2 hash")
            return configured_hash

        if settings.admin_password is not None:
            return hash_password(settings.admin_password.get_secret_value())

        generated = secrets.token_urlsafe(16)
        # The only time this password is ever visible
        logger.warning(
            f"No ADMIN_PASSWORD configured. Generated admin password: {generated} "
            "(store it now, it will not be shown again)"
        )
        return hash_password(generated)

    async def update_credentials(self, username: str, email: str, new_password: str) -> AdminAccount:
        """Replace the admin identity and store a freshly hashed password."""
        account = await self.get_or_create_account()
        account.username = username.strip()
        account.email = email.strip().lower()
        account.password_hash = hash_password(new_password)
        account.password_scheme = PASSWORD_SCHEME_ARGON2
        await self.save(account)
        logger.info(f"Admin credentials updated: {account.username} <{account.email}>")
        return account

    async def upgrade_legacy_password(self, account: AdminAccount, password: str) -> None:
        """Replace a plaintext credential with its hash."""
        account.password_hash = hash_password(password)
        account.password_scheme = PASSWORD_SCHEME_ARGON2
        await self.save(account)
        logger.info(f"Migrated legacy {PASSWORD_SCHEME_PLAINTEXT} password to argon2")

    async def save(self, account: AdminAccount) -> None:
        """Persist the account's pending changes."""
        # Read before commit: a rollback expires every loaded attribute
        username = account.username
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Failed to persist admin account {username}")
            raise ServerError() from e
