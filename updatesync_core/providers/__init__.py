"""Release providers for update resolution."""

from .base import ProviderAdapter, parse_json_body
from .generic import GenericAdapter
from .github import GitHubAdapter
from .gitlab import GitLabAdapter
from .resolver import ProviderResolver

__all__ = [
    "GenericAdapter",
    "GitHubAdapter",
    "GitLabAdapter",
    "ProviderAdapter",
    "ProviderResolver",
    "parse_json_body",
]
