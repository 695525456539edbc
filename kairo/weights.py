"""Business-process significance weights for dependency edges.

Scale:

* 10 - Flow invoking Apex (clear business process)
* 9  - Flow manipulating data
* 8  - Trigger handler pattern, or Lightning UI calling Apex
* 7  - Apex invoking a Flow
* 6  - Object relationships, or DML from code
* 5  - Apex class collaboration
* 3  - Trigger declaration on an object, and every unlisted combination
* 2  - Routine SOQL reads
* 1  - Type references (technical infrastructure)
"""

from __future__ import annotations

from typing import Optional

from .models import Dependency

WEIGHT_VALUES = frozenset({1, 2, 3, 5, 6, 7, 8, 9, 10})
DEFAULT_WEIGHT = 3
PROCESS_SIGNIFICANT_THRESHOLD = 7

_LIGHTNING_TYPES = ("LightningWebComponent", "AuraComponent")
_APEX_TYPES = ("ApexClass", "ApexTrigger")


def calculate_weight(
    from_type: str,
    to_type: str,
    edge_type: str,
    source: Optional[str] = None,
) -> int:
    """Return the weight for an edge of the given shape. First matching rule wins."""
    if from_type == "Flow" and to_type == "ApexClass":
        return 10
    if from_type == "Flow" and to_type == "CustomObject":
        return 9
    if from_type in _LIGHTNING_TYPES and to_type == "ApexClass":
        return 8
    if from_type == "ApexTrigger" and to_type == "ApexClass":
        return 8
    if from_type == "ApexClass" and to_type == "Flow":
        return 7
    if from_type == "ApexTrigger" and to_type == "CustomObject" and edge_type == "triggers_on":
        return 3
    if from_type == "CustomObject" and to_type == "CustomObject":
        return 6
    if from_type == "ApexClass" and to_type == "ApexClass":
        return 5
    if from_type in _APEX_TYPES and to_type == "CustomObject":
        if source == "dml":
            return 6
        if source in ("soql", "soql_or_dml"):
            return 2
        if source == "type_reference":
            return 1
        return 2
    return DEFAULT_WEIGHT


def component_type(component_id: str) -> str:
    """Type prefix of a ``Type:Name`` id, ``Unknown`` when it is empty."""
    return component_id.split(":", 1)[0] or "Unknown"


def weight_for(dependency: Dependency) -> int:
    return calculate_weight(
        component_type(dependency.src),
        component_type(dependency.dst),
        dependency.type,
        dependency.source,
    )


def effective_weight(dependency: Dependency) -> int:
    """Stored weight, or the calculated one when the edge carries none."""
    if dependency.weight is not None:
        return dependency.weight
    return weight_for(dependency)


def is_process_significant(dependency: Dependency) -> bool:
    return effective_weight(dependency) >= PROCESS_SIGNIFICANT_THRESHOLD


def categorize(weight: int) -> str:
    """Human-readable band for a weight."""
    if weight >= 9:
        return "Critical Process"
    if weight >= 7:
        return "Business Logic"
    if weight >= 5:
        return "Code Structure"
    if weight >= 3:
        return "Data Operations"
    return "Infrastructure"
