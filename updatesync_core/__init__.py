"""Release lookup, update manifests and install remapping for plugins and themes."""

from .cache import CACHE_NAMESPACE, DEFAULT_TTL_SECONDS, CacheGateway, FileCache, MemoryCache, cache_key
from .config import ConfigService, ProviderSettings, UpdateSyncConfig
from .descriptor import load_local_descriptor, read_header
from .engine import UpdateResolutionEngine
from .errors import (
    InvalidUpdateSource,
    MalformedResponse,
    MissingUpdateSource,
    NetworkError,
    RemapFailed,
    RemoteRepoNotFound,
    UnknownProvider,
    UpdateSyncError,
)
from .host import apply_decision, package_information, update_record
from .http import HttpFetcher
from .install import ArchiveSourceRemapper, AuthHeaderInjector, select_upgrade_source
from .providers import GenericAdapter, GitHubAdapter, GitLabAdapter, ProviderAdapter, ProviderResolver
from .types import CacheEntry, FetchResponse, LocalDescriptor, UpdateDecision, UpdateManifest
from .versions import compare_versions, is_newer, version_key

__all__ = [
    "CACHE_NAMESPACE",
    "DEFAULT_TTL_SECONDS",
    "ArchiveSourceRemapper",
    "AuthHeaderInjector",
    "CacheEntry",
    "CacheGateway",
    "ConfigService",
    "FetchResponse",
    "FileCache",
    "GenericAdapter",
    "GitHubAdapter",
    "GitLabAdapter",
    "HttpFetcher",
    "LocalDescriptor",
    "MalformedResponse",
    "MemoryCache",
    "InvalidUpdateSource",
    "MissingUpdateSource",
    "NetworkError",
    "ProviderAdapter",
    "ProviderResolver",
    "ProviderSettings",
    "RemapFailed",
    "RemoteRepoNotFound",
    "UnknownProvider",
    "UpdateDecision",
    "UpdateManifest",
    "UpdateResolutionEngine",
    "UpdateSyncConfig",
    "UpdateSyncError",
    "apply_decision",
    "cache_key",
    "compare_versions",
    "is_newer",
    "load_local_descriptor",
    "package_information",
    "read_header",
    "select_upgrade_source",
    "update_record",
    "version_key",
]
