"""YAML helpers for the small hand-editable preferences file."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from common.log_utils import log_debug

PathLike = Union[str, Path]


class FlowListDumper(yaml.SafeDumper):
    """Safe dumper that keeps short scalar lists on one line."""


def _represent_list(dumper: FlowListDumper, data: list) -> yaml.Node:
    scalars = all(isinstance(v, (str, int, float, bool, type(None))) for v in data)
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=scalars and len(data) <= 12)


FlowListDumper.add_representer(list, _represent_list)


def load_yaml(file_path: PathLike) -> dict:
    """Mapping stored at ``file_path``; ``{}`` if missing, unreadable or not a mapping."""
    try:
        with open(file_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as exc:
        log_debug(f"Ignoring unreadable YAML {file_path}: {exc}", "YAML")
        return {}
    return data if isinstance(data, dict) else {}


def save_yaml(file_path: PathLike, data: Mapping[str, Any]) -> bool:
    """Write ``data`` through a temp file so a crash never leaves half a file."""
    target = Path(file_path)
    tmp = target.with_name(f".{target.name}.tmp")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as fh:
            yaml.dump(dict(data), fh, Dumper=FlowListDumper, sort_keys=False, allow_unicode=True)
        os.replace(tmp, target)
    except (OSError, yaml.YAMLError) as exc:
        log_debug(f"Could not write {target}: {exc}", "YAML")
        return False
    return True
