"""kubectl-aws-sso-auth"""
from typing import List, Optional

import sys

from . import entrypoint
from ...lib.constants import ENVVAR_PREFIX

def main(argv: Optional[List[str]] = None) -> None:
    """Entrypoint for the command script."""
    # Allow overriding command line params for debugging.
    if argv is not None:
        sys.argv = argv

    entrypoint(auto_envvar_prefix=ENVVAR_PREFIX)

if __name__ == "__main__":
    main()
