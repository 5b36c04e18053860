"""YAML reporter — the JSON report structure dumped with PyYAML."""

from __future__ import annotations

from typing import Union

import yaml

from rsloc.output.json_report import to_dict
from rsloc.stats.models import CountResult, DiffResult


def render(
    result: Union[CountResult, DiffResult],
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> str:
    return yaml.safe_dump(
        to_dict(result, by_file=by_file, by_crate=by_crate, by_module=by_module),
        sort_keys=False,
        default_flow_style=False,
    )
