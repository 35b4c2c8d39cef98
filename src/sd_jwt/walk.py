"""
sd_jwt/walk.py
Structural correlation of a structure tree with a subject tree.
"""
import logging
from typing import Any, Callable, Dict, List

from .errors import MalformedInputError
from .tree import ClaimNode, NodeKind, kind_of

logger = logging.getLogger(__name__)

Combine = Callable[[Any, Any], Any]


def walk_by_structure(
    structure: ClaimNode,
    subject: ClaimNode,
    combine: Combine,
    broadcast: bool = True
) -> ClaimNode:
    """Zip a structure tree with a subject tree.

    The subject's shape drives iteration; the structure may be sparser.
    At every position:

    - object against object recurses over the subject's keys, a key
      missing from the structure is passed on as None
    - array against array recurses element-wise; a one-element structure
      array is reused for every subject element when ``broadcast`` is set,
      otherwise the lengths must match
    - any other pairing calls ``combine(structure_node, subject_node)``
      and takes its result without descending further

    Example:
        walk_by_structure({}, {"a": 1, "b": {"c": 2}}, lambda s, v: [v])
        # {"a": [1], "b": [{"c": 2}]}

    Args:
        structure: Structure tree (disclosure structure, selection, digests)
        subject: Subject tree (claims, SVC, release)
        combine: Function applied at every atomic position
        broadcast: Allow one-element structure arrays to broadcast

    Returns:
        A new tree shaped like ``subject``

    Raises:
        MalformedInputError: On an array length mismatch or non-JSON input
    """
    structure_kind = kind_of(structure)
    subject_kind = kind_of(subject)

    if structure_kind is NodeKind.OBJECT and subject_kind is NodeKind.OBJECT:
        return _walk_object(structure, subject, combine, broadcast)
    if structure_kind is NodeKind.ARRAY and subject_kind is NodeKind.ARRAY:
        return _walk_array(structure, subject, combine, broadcast)
    return combine(structure, subject)


def _walk_object(
    structure: Dict[str, Any],
    subject: Dict[str, Any],
    combine: Combine,
    broadcast: bool
) -> Dict[str, Any]:
    return {
        key: walk_by_structure(structure.get(key), value, combine, broadcast)
        for key, value in subject.items()
    }


def _walk_array(
    structure: List[Any],
    subject: List[Any],
    combine: Combine,
    broadcast: bool
) -> List[Any]:
    if broadcast and len(structure) == 1:
        logger.debug("Broadcasting one-element structure over %d array elements", len(subject))
        element_structures = structure * len(subject)
    elif len(structure) == len(subject):
        element_structures = structure
    else:
        logger.debug("Array length mismatch: %d vs %d", len(structure), len(subject))
        raise MalformedInputError(
            f"Array length mismatch: structure has {len(structure)} "
            f"elements, subject has {len(subject)}"
        )
    return [
        walk_by_structure(element_structure, element, combine, broadcast)
        for element_structure, element in zip(element_structures, subject)
    ]
