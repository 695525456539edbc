"""Kairo: Salesforce metadata dependency graph analyzer."""

from __future__ import annotations

__version__ = "0.1.0"

from .analyzer import MetadataAnalyzer, analyze
from .graph import GraphBuilder
from .models import AnalysisResult, Component, Dependency, MetadataGraph
from .weights import calculate_weight

__all__ = [
    "__version__",
    "AnalysisResult",
    "Component",
    "Dependency",
    "GraphBuilder",
    "MetadataAnalyzer",
    "MetadataGraph",
    "analyze",
    "calculate_weight",
]
