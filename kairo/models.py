"""Core data models shared by the scanner, parsers, graph builder and exporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

# Component types a graph may contain. Placeholders can carry other strings.
METADATA_TYPES = (
    "CustomObject",
    "CustomField",
    "ApexClass",
    "ApexTrigger",
    "Flow",
    "ValidationRule",
    "Layout",
    "PermissionSet",
    "Profile",
    "LightningWebComponent",
    "AuraComponent",
)

DEPENDENCY_TYPES = (
    "uses",
    "references",
    "triggers_on",
    "contains",
    "extends",
    "implements",
)


class FileCategory(str, Enum):
    """The six kinds of metadata file the scanner hands to the analyzer."""

    CUSTOM_OBJECT = "CustomObject"
    APEX_CLASS = "ApexClass"
    APEX_TRIGGER = "ApexTrigger"
    FLOW = "Flow"
    LWC = "LWC"
    AURA = "Aura"


@dataclass
class Component:
    id: str
    name: str
    type: str
    file_path: Optional[str] = None
    label: Optional[str] = None
    description: Optional[str] = None
    namespace: Optional[str] = None

    @classmethod
    def create(cls, component_type: str, name: str, file_path: Optional[str] = None, **kwargs: Any) -> "Component":
        return cls(id=f"{component_type}:{name}", name=name, type=component_type, file_path=file_path, **kwargs)


@dataclass
class Dependency:
    src: str
    dst: str
    type: str
    weight: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> Optional[str]:
        """Extraction provenance tag (``dml``, ``soql``, ...), if any."""
        value = self.metadata.get("source")
        return str(value) if value is not None else None


@dataclass(frozen=True)
class MetadataFile:
    path: Path
    category: FileCategory
    name: str


@dataclass(frozen=True)
class MetadataIndexes:
    """Name sets built in one scan and never mutated afterward."""

    object_names: FrozenSet[str] = frozenset()
    field_names: FrozenSet[str] = frozenset()
    apex_class_names: FrozenSet[str] = frozenset()
    apex_trigger_names: FrozenSet[str] = frozenset()
    lwc_names: FrozenSet[str] = frozenset()
    aura_names: FrozenSet[str] = frozenset()
    flow_names: FrozenSet[str] = frozenset()


@dataclass
class ParseResult:
    component: Component
    dependencies: List[Dependency] = field(default_factory=list)


@dataclass
class MetadataGraph:
    components: Dict[str, Component] = field(default_factory=dict)
    dependencies: List[Dependency] = field(default_factory=list)


@dataclass
class AnalysisStats:
    total_components: int
    components_by_type: Dict[str, int]
    total_dependencies: int


@dataclass
class AnalysisResult:
    graph: MetadataGraph
    stats: AnalysisStats
