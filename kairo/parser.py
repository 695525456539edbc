"""Pattern-based parsers for Salesforce metadata files.

Each parser turns one file's content into a :class:`~kairo.models.Component`
plus the dependency edges it declares. Extraction is intentionally lightweight
(regular expressions and a shallow XML read), not a grammar-level parse:

- :class:`CustomObjectParser` -- object XML: lookup / master-detail fields and
  formula token references.
- :class:`ApexParser` -- classes and triggers: DML, SOQL, type references,
  instantiations and the trigger's target object.
- :class:`LWCParser` -- ``@salesforce/apex`` imports in the main JS module.
- :class:`AuraParser` -- ``controller`` / ``provider`` attributes in markup.

Parsers never swallow errors; the analyzer isolates failures per file.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from .config import BUILTIN_APEX_TYPES
from .models import Component, Dependency, ParseResult
from .registry import ExtractionContext
from .weights import weight_for

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class KairoError(Exception):
    """Base class for Kairo errors."""


class MetadataParseError(KairoError):
    """A metadata file could not be interpreted."""


def make_dependency(src: str, dst: str, dep_type: str, **metadata: Any) -> Dependency:
    """Build an edge and stamp its weight."""
    dep = Dependency(src=src, dst=dst, type=dep_type, metadata=metadata)
    dep.weight = weight_for(dep)
    return dep


# ===================================================================
# Abstract Parser Interface
# ===================================================================

class MetadataParser(ABC):
    """Abstract base class for all metadata parsers."""

    component_type: str

    @abstractmethod
    def parse(
        self,
        content: str,
        file_path: PathLike,
        context: Optional[ExtractionContext] = None,
        name: Optional[str] = None,
    ) -> ParseResult:
        """Parse one file's content into a component and its edges."""
        ...

    @abstractmethod
    def default_name(self, file_path: Path) -> str:
        """Component name derived from the file location."""
        ...

    def parse_file(
        self,
        file_path: PathLike,
        context: Optional[ExtractionContext] = None,
        name: Optional[str] = None,
    ) -> ParseResult:
        content = Path(file_path).read_text(encoding="utf-8")
        return self.parse(content, file_path, context, name)


# ===================================================================
# CustomObject
# ===================================================================

_FORMULA_OBJECT_TOKEN = re.compile(r"\b([A-Z][a-z_]*__c|Account|Contact|Opportunity)\b")
_RELATIONSHIP_FIELD_TYPES = ("Lookup", "MasterDetail")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_texts(element: ET.Element, tag: str) -> List[str]:
    texts = []
    for child in element:
        if _local_name(child.tag) == tag and child.text is not None:
            texts.append(child.text.strip())
    return texts


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    texts = _child_texts(element, tag)
    return texts[0] if texts else None


class CustomObjectParser(MetadataParser):
    """Reads ``*.object-meta.xml``; the object name is the parent folder."""

    component_type = "CustomObject"

    def default_name(self, file_path: Path) -> str:
        return file_path.parent.name

    def parse(
        self,
        content: str,
        file_path: PathLike,
        context: Optional[ExtractionContext] = None,
        name: Optional[str] = None,
    ) -> ParseResult:
        path = Path(file_path)
        root = ET.fromstring(content)
        if _local_name(root.tag) != "CustomObject":
            raise MetadataParseError(f"{path}: expected <CustomObject> root, got <{_local_name(root.tag)}>")

        object_name = name or self.default_name(path)
        component = Component.create(
            self.component_type,
            object_name,
            str(file_path),
            label=_child_text(root, "label"),
            description=_child_text(root, "description"),
        )

        dependencies: List[Dependency] = []
        for field_el in root:
            if _local_name(field_el.tag) != "fields":
                continue
            field_name = _child_text(field_el, "fullName")
            field_type = _child_text(field_el, "type")

            if field_type in _RELATIONSHIP_FIELD_TYPES:
                for ref_object in _child_texts(field_el, "referenceTo"):
                    dependencies.append(make_dependency(
                        component.id,
                        f"CustomObject:{ref_object}",
                        "references",
                        fieldName=field_name,
                        relationshipType=field_type,
                    ))

            # Token scan only, formulas are not parsed.
            formula = _child_text(field_el, "formula")
            if formula:
                for ref in dict.fromkeys(_FORMULA_OBJECT_TOKEN.findall(formula)):
                    dependencies.append(make_dependency(
                        component.id,
                        f"CustomObject:{ref}",
                        "references",
                        fieldName=field_name,
                        source="formula",
                    ))

        return ParseResult(component, dependencies)


# ===================================================================
# Apex classes and triggers
# ===================================================================

_OBJECT_TOKEN = r"([A-Z][a-zA-Z0-9_]*__[cm]|Account|Contact|Opportunity|Case|Lead)"
_DML_PATTERN = re.compile(r"(?:INSERT|UPDATE|DELETE|UPSERT)\s+" + _OBJECT_TOKEN, re.IGNORECASE)
_SOQL_PATTERN = re.compile(r"FROM\s+" + _OBJECT_TOKEN, re.IGNORECASE)
# Not after a dot (record.Field__c), and only in generic, constructor or
# declaration position.
_TYPE_REFERENCE_PATTERN = re.compile(
    r"(?<!\.)\b([A-Z][a-zA-Z0-9_]*__(?:c|mdt))\b(?=>|[ \t]*\(|[ \t]+[a-z])"
)
_NEXT_WORD = re.compile(r"[\s,]*([A-Za-z]+)")
_SOQL_CLAUSE_KEYWORDS = frozenset({"from", "where", "order", "group", "limit", "offset", "having"})
_INSTANTIATION_PATTERN = re.compile(r"new\s+([A-Z][a-zA-Z0-9_]*)\s*\(")
_TRIGGER_PATTERN = re.compile(r"trigger\s+\w+\s+on\s+([A-Z][a-zA-Z0-9_]*)")

_APEX_SUFFIXES = {"ApexClass": ".cls", "ApexTrigger": ".trigger"}


class ApexParser(MetadataParser):
    """Extracts object and class dependencies from Apex source."""

    def __init__(self, component_type: str = "ApexClass") -> None:
        if component_type not in _APEX_SUFFIXES:
            raise ValueError(f"Unsupported Apex component type: {component_type}")
        self.component_type = component_type

    def default_name(self, file_path: Path) -> str:
        entry = file_path.name
        for suffix in _APEX_SUFFIXES.values():
            if entry.endswith(suffix):
                return entry[: -len(suffix)]
        return entry

    def parse(
        self,
        content: str,
        file_path: PathLike,
        context: Optional[ExtractionContext] = None,
        name: Optional[str] = None,
    ) -> ParseResult:
        context = context or ExtractionContext()
        component = Component.create(
            self.component_type,
            name or self.default_name(Path(file_path)),
            str(file_path),
        )

        dependencies: List[Dependency] = []
        operations = self._object_operations(content, context)
        for object_name, ops in operations.items():
            source = "dml" if "dml" in ops else "soql"
            dependencies.append(make_dependency(
                component.id, f"CustomObject:{object_name}", "uses", source=source,
            ))

        dependencies.extend(self._type_references(content, component.id, context, operations))
        dependencies.extend(self._instantiations(content, component.id, context))

        if self.component_type == "ApexTrigger":
            match = _TRIGGER_PATTERN.search(content)
            if match:
                trigger_object = context.resolve_name(match.group(1))
                dependencies.append(make_dependency(
                    component.id, f"CustomObject:{trigger_object}", "triggers_on",
                ))

        return ParseResult(component, dependencies)

    @staticmethod
    def _object_operations(content: str, context: ExtractionContext) -> Dict[str, Set[str]]:
        operations: Dict[str, Set[str]] = {}
        for pattern, op in ((_DML_PATTERN, "dml"), (_SOQL_PATTERN, "soql")):
            for match in pattern.finditer(content):
                object_name = context.resolve_name(match.group(1))
                operations.setdefault(object_name, set()).add(op)
        return operations

    @staticmethod
    def _type_references(
        content: str,
        component_id: str,
        context: ExtractionContext,
        operations: Dict[str, Set[str]],
    ) -> List[Dependency]:
        dependencies: List[Dependency] = []
        found: Set[str] = set()
        for match in _TYPE_REFERENCE_PATTERN.finditer(content):
            object_name = context.resolve_name(match.group(1))
            next_word = _NEXT_WORD.match(content, match.end())
            if next_word and next_word.group(1).lower() in _SOQL_CLAUSE_KEYWORDS:
                # SELECT-list field such as "Amount__c FROM"
                continue
            if object_name in operations or object_name in found:
                continue
            found.add(object_name)
            dependencies.append(make_dependency(
                component_id, f"CustomObject:{object_name}", "references", source="type_reference",
            ))
        return dependencies

    @staticmethod
    def _instantiations(content: str, component_id: str, context: ExtractionContext) -> List[Dependency]:
        dependencies: List[Dependency] = []
        seen: Set[str] = set()
        for match in _INSTANTIATION_PATTERN.finditer(content):
            class_name = match.group(1)
            if class_name in BUILTIN_APEX_TYPES or class_name in seen:
                continue
            seen.add(class_name)
            if context.is_object_name and context.is_object_name(class_name):
                dependencies.append(make_dependency(
                    component_id,
                    f"CustomObject:{context.resolve_name(class_name)}",
                    "uses",
                    source="sobject_instantiation",
                ))
            elif context.is_apex_class is None or context.is_apex_class(class_name):
                dependencies.append(make_dependency(
                    component_id, f"ApexClass:{class_name}", "uses", source="instantiation",
                ))
        return dependencies


# ===================================================================
# Lightning components
# ===================================================================

_LWC_APEX_IMPORT = re.compile(r"""from\s+['"]@salesforce/apex/([A-Za-z0-9_]+)\.""")
_AURA_CONTROLLER = re.compile(r"""controller\s*=\s*["']([A-Za-z0-9_]+)["']""", re.IGNORECASE)
_AURA_PROVIDER = re.compile(r"""provider\s*=\s*["']([A-Za-z0-9_]+)["']""", re.IGNORECASE)


class _LightningParser(MetadataParser):
    """Shared flow for LWC and Aura: collect Apex class names, one edge each."""

    patterns: tuple = ()
    edge_source: str = ""

    def parse(
        self,
        content: str,
        file_path: PathLike,
        context: Optional[ExtractionContext] = None,
        name: Optional[str] = None,
    ) -> ParseResult:
        context = context or ExtractionContext()
        component = Component.create(
            self.component_type,
            name or self.default_name(Path(file_path)),
            str(file_path),
        )

        dependencies: List[Dependency] = []
        seen: Set[str] = set()
        for pattern in self.patterns:
            for match in pattern.finditer(content):
                class_name = match.group(1)
                if class_name in seen:
                    continue
                if context.is_apex_class is not None and not context.is_apex_class(class_name):
                    continue
                seen.add(class_name)
                dependencies.append(make_dependency(
                    component.id, f"ApexClass:{class_name}", "uses", source=self.edge_source,
                ))
        return ParseResult(component, dependencies)


class LWCParser(_LightningParser):
    """Main JS module of a Lightning Web Component; named after its folder."""

    component_type = "LightningWebComponent"
    patterns = (_LWC_APEX_IMPORT,)
    edge_source = "lwc_apex_import"

    def default_name(self, file_path: Path) -> str:
        return file_path.parent.name


class AuraParser(_LightningParser):
    """Aura ``.cmp`` / ``.app`` markup; named after the file."""

    component_type = "AuraComponent"
    patterns = (_AURA_CONTROLLER, _AURA_PROVIDER)
    edge_source = "aura_controller"

    def default_name(self, file_path: Path) -> str:
        return file_path.name.rsplit(".", 1)[0]
