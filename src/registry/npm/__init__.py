"""NPM registry package.

- client.py: packument lookups implementing the version oracle
"""

from .client import NpmRegistryClient, package_url

__all__ = [
    "NpmRegistryClient",
    "package_url",
]
