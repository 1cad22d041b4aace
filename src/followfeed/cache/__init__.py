from .metadata import CACHE_VERSION, JsonFileCache, MetadataCacheEntry

__all__ = [
    "CACHE_VERSION",
    "JsonFileCache",
    "MetadataCacheEntry",
]
