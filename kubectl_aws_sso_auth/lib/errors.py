"""Error types raised by kubectl-aws-sso-auth.

Everything derives from click.ClickException so that an error escaping a command
is printed to stderr as ``Error: <message>`` and the process exits non-zero,
leaving stdout untouched for kubectl.
"""
import click


class KubectlAwsSsoAuthError(click.ClickException):
    """Base class for all errors surfaced to the user"""


class ConfigError(KubectlAwsSsoAuthError):
    """Configuration is missing or unusable"""


class HomeResolutionError(ConfigError):
    """The user's home directory could not be determined"""


class ToolingMissing(KubectlAwsSsoAuthError):
    """The AWS CLI is not installed or not on the PATH"""


class SessionNotFound(KubectlAwsSsoAuthError):
    """No usable SSO session could be found"""


class NoCacheFiles(SessionNotFound):
    """The SSO cache holds no session files at all"""


class CacheDirMissing(NoCacheFiles):
    """The SSO cache directory does not exist"""


class NoValidSession(SessionNotFound):
    """Cache files exist but none holds an unexpired session"""


class SessionLoadError(KubectlAwsSsoAuthError):
    """A single cache file could not be loaded as a session"""


class InvalidSessionFile(SessionLoadError):
    """The cache file could not be read or is not a JSON object of the session shape"""


class NotASession(SessionLoadError):
    """The cache file has no access token (e.g. a client registration file)"""


class LoginFailed(KubectlAwsSsoAuthError):
    """``aws sso login`` failed"""


class TokenFetchFailed(KubectlAwsSsoAuthError):
    """``aws eks get-token`` failed or returned something unparseable"""


class SerializationFailed(KubectlAwsSsoAuthError):
    """The ExecCredential could not be encoded"""
