
# Location of the AWS SSO token cache, relative to the user's home directory.
SSO_CACHE_SUBDIR = (".aws", "sso", "cache")
SSO_CACHE_GLOB = "*.json"

DEFAULT_AWS_CLI = "aws"

EXEC_CREDENTIAL_API_VERSION = "client.authentication.k8s.io/v1beta1"
EXEC_CREDENTIAL_KIND = "ExecCredential"

ENV_AWS_PROFILE = "AWS_PROFILE"
ENVVAR_PREFIX = "KUBECTL_AWS_SSO_AUTH"

DEFAULT_LOG_LEVEL = "warning"
DEFAULT_LOG_FORMAT = "console"
# stdout belongs to kubectl, so logs never default there.
DEFAULT_LOG_DEST = "stderr"
