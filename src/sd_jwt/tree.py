"""
sd_jwt/tree.py
Claim tree model: node classification, JSON codec and record mapping.

Claim trees are plain JSON values. Objects are dicts with string keys
(insertion ordered), arrays are lists, and leaves are str, int, float,
bool or None. ``kind_of`` is the single place that decides which of the
three a value is; walks dispatch on its result.
"""
import dataclasses
import json
import typing
from enum import Enum
from typing import Any, Dict, List, Type, TypeVar, Union

from .errors import MalformedInputError

ClaimNode = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

T = TypeVar('T')


class NodeKind(Enum):
    """Tag of a claim tree node."""
    OBJECT = "object"
    ARRAY = "array"
    LEAF = "leaf"


_LEAF_TYPES = (str, int, float, bool, type(None))


def kind_of(node: Any) -> NodeKind:
    """Classify a node, rejecting anything that is not a JSON value.

    Raises:
        MalformedInputError: If the node is not a dict, list or JSON scalar
    """
    if isinstance(node, dict):
        for key in node:
            if not isinstance(key, str):
                raise MalformedInputError(f"Object keys must be strings, got {type(key).__name__}")
        return NodeKind.OBJECT
    if isinstance(node, list):
        return NodeKind.ARRAY
    if isinstance(node, _LEAF_TYPES):
        return NodeKind.LEAF
    raise MalformedInputError(f"Unsupported claim value of type {type(node).__name__}")


def parse_json(text: Union[str, bytes]) -> ClaimNode:
    """Parse JSON text into a claim tree.

    Raises:
        MalformedInputError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"Invalid JSON: {exc}") from exc


def parse_json_object(text: Union[str, bytes], what: str) -> Dict[str, Any]:
    """Parse JSON text that must hold an object."""
    value = parse_json(text)
    if kind_of(value) is not NodeKind.OBJECT:
        raise MalformedInputError(f"{what} must be a JSON object")
    return value


def to_tree(value: Any) -> ClaimNode:
    """Convert claims given as dataclass instances or JSON values to a tree.

    Dataclass fields become object keys in declaration order, nested
    dataclasses and lists are converted recursively.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_tree(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [to_tree(item) for item in value]
    if isinstance(value, dict):
        return {key: to_tree(item) for key, item in value.items()}
    kind_of(value)
    return value


def from_tree(record_type: Type[T], tree: ClaimNode) -> T:
    """Build a dataclass record from a disclosed claim tree.

    Keys missing from the tree (withheld claims) fall back to the field
    default, so record types used for selective disclosure should give
    every field a default of None. Unknown keys are ignored.

    Raises:
        MalformedInputError: If the tree does not fit the record type
    """
    return _convert(record_type, tree)


def _convert(target: Any, value: Any) -> Any:
    if value is None:
        return None
    if dataclasses.is_dataclass(target) and isinstance(target, type):
        if kind_of(value) is not NodeKind.OBJECT:
            raise MalformedInputError(f"{target.__name__} expects an object")
        hints = typing.get_type_hints(target)
        kwargs = {
            field.name: _convert(hints.get(field.name, Any), value[field.name])
            for field in dataclasses.fields(target)
            if field.name in value
        }
        try:
            return target(**kwargs)
        except TypeError as exc:
            raise MalformedInputError(f"Cannot build {target.__name__}: {exc}") from exc

    origin = typing.get_origin(target)
    args = typing.get_args(target)
    if origin is Union:
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _convert(candidates[0], value)
        return value
    if origin in (list, List):
        if kind_of(value) is not NodeKind.ARRAY:
            raise MalformedInputError(f"Expected an array for {target}")
        item_type = args[0] if args else Any
        return [_convert(item_type, item) for item in value]
    return value
