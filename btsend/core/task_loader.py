"""Loading and saving YAML task files of named records."""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from btsend.core.errors import TaskLoadError, TaskValidationError
from btsend.core.model import LoadedTasks, Task
from btsend.core.record import build, error_for

LOGGER = logging.getLogger(__name__)
_TEXT_ONLY_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


# Task values are always text: "on", "1", 2024-01-01 and 10:11:22:33:44:55 stay strings.
UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag not in _TEXT_ONLY_TAGS
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise TaskValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("btsend.schemas").joinpath("task.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_tasks_path() -> Path:
    override = os.environ.get("BTSEND_TASKS")
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "btsend/tasks.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TaskLoadError(f"Could not read task file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise TaskValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise TaskValidationError(f"Task file {path} must contain a mapping at root")
    return loaded


def _build_tasks(doc: dict[str, Any], source: Path) -> dict[str, Task]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise TaskValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    tasks: dict[str, Task] = {}
    for name, entry in doc["tasks"].items():
        address, command = entry["address"], entry["command"]
        record = build(address, command)
        if record is None:
            raise TaskValidationError(f"Task '{name}' in {source}: {error_for(address, command)}")
        tasks[name] = Task(name=name, record=record)
    return tasks


def load_tasks(path: Path | None = None) -> LoadedTasks:
    """Load tasks from ``path``, or from the default location when omitted.

    A missing default file yields no tasks; a missing explicit file is an error.
    """
    source = path or default_tasks_path()
    if path is None and not source.exists():
        LOGGER.debug("No task file at %s", source)
        return LoadedTasks(tasks={}, source=str(source))

    doc = _read_yaml(source)
    tasks = _build_tasks(doc, source)
    LOGGER.debug("Loaded %d task(s) from %s", len(tasks), source)
    return LoadedTasks(tasks=tasks, source=str(source))


def dump_tasks(tasks: dict[str, Task], path: Path) -> None:
    doc = {
        "tasks": {
            name: {"address": task.record.address, "command": task.record.command}
            for name, task in sorted(tasks.items())
        }
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(doc, sort_keys=False), encoding="utf-8")
    except OSError as exc:
        raise TaskLoadError(f"Could not write task file {path}: {exc}") from exc
