from .kubectl_aws_sso_auth import entrypoint

__all__ = ["entrypoint"]
