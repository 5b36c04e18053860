"""Source collaborators — discovery, filtering, reading, path contexts."""

from rsloc.source.discovery import DiscoveryError, discover_files
from rsloc.source.filter import FileFilter, is_rust_source
from rsloc.source.paths import context_for_file, context_for_path
from rsloc.source.reader import ReadError, decode_source, looks_binary, read_source
from rsloc.source.workspace import (
    CrateInfo,
    crate_for_path,
    discover_crates,
    find_workspace_root,
    module_name,
)

__all__ = [
    "CrateInfo",
    "DiscoveryError",
    "FileFilter",
    "ReadError",
    "context_for_file",
    "context_for_path",
    "crate_for_path",
    "decode_source",
    "discover_crates",
    "discover_files",
    "find_workspace_root",
    "is_rust_source",
    "looks_binary",
    "module_name",
    "read_source",
]
