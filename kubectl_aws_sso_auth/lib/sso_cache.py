"""
Reads the AWS SSO token cache written by ``aws sso login``.

The cache directory holds two kinds of JSON files side by side: session files,
which carry an ``accessToken`` and an ``expiresAt`` timestamp, and client
registration files, which do not. They are told apart purely by the presence of
the access token. Nothing here ever writes to or deletes from the cache.
"""
import datetime
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import pyrfc3339
import pytz

from . import logging
from .constants import SSO_CACHE_SUBDIR, SSO_CACHE_GLOB
from .errors import (
    CacheDirMissing,
    HomeResolutionError,
    InvalidSessionFile,
    NoCacheFiles,
    NotASession,
    NoValidSession,
    SessionLoadError,
)

logger = logging.get_logger()

# JSON key -> attribute name
_SESSION_FIELDS = {
    "startUrl": "start_url",
    "region": "region",
    "accessToken": "access_token",
    "expiresAt": "expires_at",
}


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(pytz.utc)


@dataclass
class SSOSession:
    start_url: str = field(default="")
    region: str = field(default="")
    access_token: str = field(default="")
    expires_at: str = field(default="")

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "SSOSession":
        """Parse a cache file body. Missing fields default to the empty string.

        Bytes that are not valid UTF-8 are reported as a malformed file.
        """
        try:
            raw = json.loads(data)
        except ValueError as e:
            raise InvalidSessionFile(f"failed to parse session JSON: {e}") from e

        if not isinstance(raw, dict):
            raise InvalidSessionFile("failed to parse session JSON: not an object")

        kwargs = {}
        for key, attr in _SESSION_FIELDS.items():
            value = raw.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise InvalidSessionFile(f"failed to parse session JSON: {key} is not a string")
            kwargs[attr] = value
        return cls(**kwargs)

    def expiry(self) -> Optional[datetime.datetime]:
        """The parsed expiresAt, or None if it is not a strict RFC 3339 timestamp"""
        try:
            return pyrfc3339.parse(self.expires_at)
        except (ValueError, TypeError):
            return None

    def is_valid(self, now: Optional[datetime.datetime] = None) -> bool:
        """True while the session has not yet expired. Unparseable expiry means not valid."""
        expires = self.expiry()
        if expires is None:
            return False
        if now is None:
            now = utc_now()
        return now < expires


def locate_cache_directory() -> Path:
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeResolutionError(f"failed to get home directory: {e}") from e
    return home.joinpath(*SSO_CACHE_SUBDIR)


def list_session_files(cache_dir: Optional[Path] = None) -> List[Path]:
    """
    List the JSON files in the SSO cache directory.

    Files come back in lexical name order. An existing but empty directory yields an
    empty list rather than an error.

    :raises CacheDirMissing: the directory does not exist
    """
    if cache_dir is None:
        cache_dir = locate_cache_directory()

    if not cache_dir.exists():
        raise CacheDirMissing(f"SSO cache directory does not exist: {cache_dir}")

    return sorted(cache_dir.glob(SSO_CACHE_GLOB))


def load_session(path: Path) -> SSOSession:
    """
    Load a session from a cache file.

    :raises InvalidSessionFile: the file can't be read or isn't session shaped JSON
    :raises NotASession: the file has no access token (client registration files)
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InvalidSessionFile(f"failed to read session file: {e}") from e

    session = SSOSession.from_json(data)

    if session.access_token == "":
        raise NotASession("not a valid session file (no access token)")

    return session


def _load_sessions(files: List[Path]) -> Iterator[Tuple[Path, SSOSession]]:
    for path in files:
        try:
            session = load_session(path)
        except SessionLoadError as e:
            logger.debug("Skipping SSO cache file", path=str(path), reason=e.message)
            continue
        yield path, session


def find_valid_session(cache_dir: Optional[Path] = None,
                       now: Optional[datetime.datetime] = None) -> SSOSession:
    """
    Find an unexpired SSO session in the cache.

    The first valid session in file name order is returned. When several sessions are
    valid no preference between them is implied.

    :raises NoCacheFiles: there are no cache files (or no cache directory)
    :raises NoValidSession: files exist but none holds a valid session
    """
    files = list_session_files(cache_dir)
    if len(files) == 0:
        raise NoCacheFiles("no SSO cache files found")

    for path, session in _load_sessions(files):
        if session.is_valid(now):
            logger.debug("Found valid SSO session", path=str(path), expires_at=session.expires_at)
            return session

        logger.debug("SSO session expired", path=str(path), expires_at=session.expires_at)

    raise NoValidSession("no valid SSO session found")


def iter_sessions(cache_dir: Optional[Path] = None) -> Iterator[Tuple[Path, SSOSession]]:
    """Yield (path, session) for every loadable session file, valid or not."""
    return _load_sessions(list_session_files(cache_dir))
