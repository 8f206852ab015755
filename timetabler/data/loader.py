"""Load and save schedule store files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..errors import DataValidationError
from .models import ScheduleStore


def load_store(path: Union[str, Path]) -> ScheduleStore:
    """
    Load and validate a schedule store from a JSON file.

    Keys may be written in camelCase (as an API would serve them)
    or snake_case.

    Args:
        path: Path to the JSON file

    Returns:
        Validated ScheduleStore

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        DataValidationError: If the data fails validation
    """
    path = Path(path)

    with open(path) as f:
        data = json.load(f)

    return parse_store(data)


def parse_store(data: dict) -> ScheduleStore:
    """
    Validate raw store data.

    Raises:
        DataValidationError: If validation fails
    """
    if not isinstance(data, dict):
        raise DataValidationError("Store data must be a JSON object")

    try:
        return ScheduleStore.model_validate(_convert_keys_to_snake_case(data))
    except ValidationError as e:
        raise DataValidationError(str(e)) from e


def save_store(store: ScheduleStore, path: Union[str, Path], indent: int = 2) -> None:
    """Write a schedule store to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(store.model_dump_json(indent=indent))


def _convert_keys_to_snake_case(obj: Any) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""

    def to_snake_case(name: str) -> str:
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
        return name.lower()

    if isinstance(obj, dict):
        return {to_snake_case(k): _convert_keys_to_snake_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj
