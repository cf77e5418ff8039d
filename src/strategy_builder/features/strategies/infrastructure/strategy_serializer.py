"""
Strategy Serializer

JSON and YAML documents for StrategyDefinition. Exports are deterministic:
the same definition always produces the same text, with no export timestamp.

Document layout:
    format_version: 1
    strategy: {id, name, description, version, blocks, connections, metadata}
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.shared.domain.exceptions import GraphIntegrityError, SerializationError
from strategy_builder.utils.message import Log


FORMAT_VERSION = 1
SUPPORTED_FORMATS = ("json", "yaml")


def _check_format(fmt: str) -> str:
    fmt = (fmt or "").lower()
    if fmt == "yml":
        fmt = "yaml"
    if fmt not in SUPPORTED_FORMATS:
        raise SerializationError(f"Unsupported format '{fmt}'. Use one of: {', '.join(SUPPORTED_FORMATS)}")
    return fmt


def to_document(definition: StrategyDefinition) -> Dict[str, Any]:
    return {"format_version": FORMAT_VERSION, "strategy": definition.to_dict()}


def from_document(document: Any) -> StrategyDefinition:
    """
    Build a definition from a parsed document.

    Accepts the wrapped layout and a bare strategy dict.
    """
    if not isinstance(document, dict):
        raise SerializationError("Strategy document must be a mapping")
    version = document.get("format_version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise SerializationError(f"Unsupported strategy document version: {version}")
    data = document.get("strategy", document)
    try:
        return StrategyDefinition.from_dict(data)
    except KeyError as e:
        raise SerializationError(f"Strategy document is missing field {e}") from e
    except (ValueError, TypeError, AttributeError) as e:
        raise SerializationError(f"Strategy document is malformed: {e}") from e
    except GraphIntegrityError as e:
        raise SerializationError(f"Strategy document is inconsistent: {e}") from e


def export_strategy(definition: StrategyDefinition, fmt: str = "json") -> str:
    """Serialize a definition to JSON or YAML text."""
    fmt = _check_format(fmt)
    document = to_document(definition)
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def import_strategy(text: str, fmt: str = "json") -> StrategyDefinition:
    """
    Parse JSON or YAML text into a definition.

    Raises:
        SerializationError: On unparsable text or an invalid document
    """
    fmt = _check_format(fmt)
    try:
        if fmt == "yaml":
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SerializationError(f"Could not parse {fmt} strategy document: {e}") from e
    if not document:
        raise SerializationError(f"Empty or invalid {fmt} strategy document")
    return from_document(document)


def write_strategy_file(
    definition: StrategyDefinition,
    path: Optional[Union[str, Path]] = None,
    fmt: str = "json",
) -> Path:
    """
    Write an exported document to disk.

    Without a path the file goes to the exports directory, named after the
    strategy id and version.
    """
    fmt = _check_format(fmt)
    if path is None:
        from strategy_builder.utils.paths import get_exports_dir
        path = get_exports_dir() / f"{definition.id}_v{definition.version}.{fmt}"
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_strategy(definition, fmt))
    Log.info(f"StrategySerializer: Wrote '{definition.name}' v{definition.version} to {path}")
    return path


def read_strategy_file(path: Union[str, Path], fmt: Optional[str] = None) -> StrategyDefinition:
    """Read a document, inferring the format from the extension when not given."""
    path = Path(path)
    fmt = _check_format(fmt or path.suffix.lstrip("."))
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise SerializationError(f"Could not read strategy file {path}: {e}") from e
    return import_strategy(text, fmt)
