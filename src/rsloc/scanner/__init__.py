"""Scanner — lexer, context resolver, count engine."""

from rsloc.scanner.engine import classify_file, classify_path, count_paths
from rsloc.scanner.lexer import ScanEvent, ScannedLine, Scanner, ScanState, scan_lines, split_lines
from rsloc.scanner.resolver import ClassifiedLine, ContextResolver, resolve

__all__ = [
    "ClassifiedLine",
    "ContextResolver",
    "ScanEvent",
    "ScanState",
    "ScannedLine",
    "Scanner",
    "classify_file",
    "classify_path",
    "count_paths",
    "resolve",
    "scan_lines",
    "split_lines",
]
