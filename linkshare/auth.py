"""Password gates: ancestor-aware authorization and the signed auth cookie.

Authorization is granted per section path. Unlocking ``/work`` does not
unlock a separately protected ``/work/private``; every password-bearing
section on the way from the root must be unlocked on its own. When a request
is blocked, :func:`find_locking_section` names the outermost gate so that
visitors clear locks from the root downwards and learn nothing about the
structure behind a gate before passing it.

The set of unlocked paths travels in a cookie signed with ``itsdangerous``.
Each path records when it was unlocked and expires on its own after 24 hours.
"""

from __future__ import annotations

import hmac
import logging
import os
import secrets
import time
import typing as typ

from itsdangerous import BadData, URLSafeSerializer

from ._constants import AUTH_SECRET_FILENAME, AUTH_TOKEN_MAX_AGE

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .scanner import Section

logger = logging.getLogger("linkshare.auth")

_SECRET_FILE_MODE = 0o600
_COOKIE_SALT = "linkshare.auth"


def is_authorized(section: Section, authorized_paths: cabc.Set[str]) -> bool:
    """Return True when every password gate from ``section`` to the root is open."""
    return all(
        node.path in authorized_paths
        for node in section.lineage()
        if node.has_password
    )


def find_locking_section(section: Section, authorized_paths: cabc.Set[str]) -> Section:
    """Return the outermost password-bearing section that is still locked.

    Returns ``section`` itself when nothing is locked; callers are expected
    to check :func:`is_authorized` first.
    """
    locker = section
    for node in section.lineage():
        if node.has_password and node.path not in authorized_paths:
            locker = node
    return locker


def check_password(section: Section, submitted: str | None) -> bool:
    """Compare a submitted password against the section's own password."""
    expected = section.config.password
    if not expected or not submitted:
        return False
    return hmac.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8"))


class AuthCookieCodec:
    """Encode and decode the signed set of unlocked section paths.

    The cookie holds a signed JSON object mapping each unlocked path to the
    UNIX timestamp at which it was unlocked. Tampered or malformed cookies
    decode to an empty set.
    """

    def __init__(self, secret: str, *, max_age: int = AUTH_TOKEN_MAX_AGE) -> None:
        if not secret:
            msg = "Auth cookie secret must not be empty."
            raise ValueError(msg)
        self.max_age = max_age
        self._serializer = URLSafeSerializer(secret, salt=_COOKIE_SALT)

    def authorized_paths(
        self, cookie_value: str | None, *, now: float | None = None
    ) -> set[str]:
        """Return the unexpired paths recorded in ``cookie_value``."""
        current = time.time() if now is None else now
        return {
            path
            for path, issued_at in self._decode(cookie_value).items()
            if current - issued_at <= self.max_age
        }

    def add_path(
        self, cookie_value: str | None, path: str, *, now: float | None = None
    ) -> str:
        """Return a new cookie value that additionally unlocks ``path``.

        Expired entries are dropped while re-encoding.
        """
        current = time.time() if now is None else now
        entries = {
            existing: issued_at
            for existing, issued_at in self._decode(cookie_value).items()
            if current - issued_at <= self.max_age
        }
        entries[path] = current
        return self._serializer.dumps(entries)

    def _decode(self, cookie_value: str | None) -> dict[str, float]:
        if not cookie_value:
            return {}
        try:
            payload = self._serializer.loads(cookie_value)
        except BadData:
            logger.debug("Discarding auth cookie with an invalid signature")
            return {}
        if not isinstance(payload, dict):
            return {}
        entries: dict[str, float] = {}
        for path, issued_at in payload.items():
            match issued_at:
                case bool():
                    continue
                case int() | float():
                    entries[str(path)] = float(issued_at)
                case _:
                    continue
        return entries


def get_or_create_secret(project_root: Path) -> str:
    """Return the signing secret, creating and persisting one if needed.

    ``AUTH_SECRET`` wins when set. Otherwise the secret is read from
    ``.linkshare-secret`` under ``project_root``, or generated and written
    there with owner-only permissions. On read-only filesystems the generated
    secret lives only in memory, so sessions do not survive a restart.
    """
    from_env = os.getenv("AUTH_SECRET", "").strip()
    if from_env:
        return from_env

    secret_path = project_root / AUTH_SECRET_FILENAME
    try:
        existing = secret_path.read_text(encoding="utf-8").strip()
    except OSError:
        existing = ""
    if existing:
        return existing

    secret = secrets.token_hex(32)
    try:
        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
        fd = os.open(secret_path, flags, _SECRET_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(secret + "\n")
    except OSError as exc:
        logger.warning(
            "Could not persist auth secret to '%s' (%s); set AUTH_SECRET for "
            "sessions that survive restarts.",
            secret_path,
            exc,
        )
    return secret


__all__ = [
    "AuthCookieCodec",
    "check_password",
    "find_locking_section",
    "get_or_create_secret",
    "is_authorized",
]
