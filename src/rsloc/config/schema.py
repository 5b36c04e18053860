"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

OutputFormat = Literal["table", "json", "csv", "yaml"]

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json", "csv", "yaml")


@dataclass
class CountConfig:
    include: List[str] = field(default_factory=list)  # empty = every .rs file
    exclude: List[str] = field(default_factory=list)
    crates: List[str] = field(default_factory=list)  # empty = every crate
    types: List[str] = field(default_factory=list)  # "code" | "tests" | "examples"; empty = all
    jobs: int = 0  # 0 = one worker per CPU
    fail_on_error: bool = False  # exit 1 when any file could not be read


@dataclass
class OutputConfig:
    format: OutputFormat = "table"
    by_file: bool = False
    by_crate: bool = False
    by_module: bool = False
    show_summary: bool = True


@dataclass
class RslocConfig:
    version: str = "1.0"
    count: CountConfig = field(default_factory=CountConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
