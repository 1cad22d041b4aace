from .auth import AuthOutcome, classify_code, ensure_authorized, require_credential
from .credentials import CredentialStore, EnvCredentialStore, MappingCredentialStore
from .fetcher import FetchResponse, Fetcher, RequestsFetcher
from .metadata import ArticleData, HttpMetadataCache, MetadataCache

__all__ = [
    "ArticleData",
    "AuthOutcome",
    "CredentialStore",
    "EnvCredentialStore",
    "FetchResponse",
    "Fetcher",
    "HttpMetadataCache",
    "MappingCredentialStore",
    "MetadataCache",
    "RequestsFetcher",
    "classify_code",
    "ensure_authorized",
    "require_credential",
]
