"""Access to the published per-date channel manifests."""

from .client import ManifestClient
from .models import Manifest
from .parser import parse_manifest

__all__ = [
    "ManifestClient",
    "Manifest",
    "parse_manifest",
]
