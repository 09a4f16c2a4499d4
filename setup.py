#!/usr/bin/env python3

import os
import sys

try:
    from setuptools import setup, find_packages
except ImportError:
    print("Please install setuptools.")
    sys.exit(1)

if sys.version_info < (3, 8):
    sys.exit("Sorry, Python < 3.8 is not supported")

here = os.path.dirname(os.path.abspath(__file__))

version_raw = os.environ.get("VERSION", None)
if version_raw is None:
    with open(os.path.join(here, "VERSION")) as f:
        version_raw = f.read()

version = version_raw.strip().split("-")

# 1.2.3-4-gabcdef (git describe) becomes the local version 1.2.3+4.gabcdef
pypi_version = version[0]
if len(version) > 1:
    pypi_version += "+" + ".".join(version[1:])

print("Setting package version to:", pypi_version, file=sys.stderr)

setup(
    name="kubectl-aws-sso-auth",
    version=pypi_version,
    description="kubectl exec credential plugin for EKS using AWS SSO sessions",
    url="",
    python_requires=">=3.8",
    install_requires=["structlog", "pytz", "ruamel.yaml", "click>=8.2", "pyrfc3339<2", "tabulate"],
    extras_require={
        "awscli": ["awscli"],
        "test": ["pytest"],
    },
    packages=find_packages(".", exclude=["tests", "tests.*"]),
    package_data={"": ["VERSION"]},
    entry_points={"console_scripts": [
        "kubectl-aws-sso-auth=kubectl_aws_sso_auth.cmd.kubectl_aws_sso_auth.__main__:main",
    ]},
)
