"""Analysis orchestrator: scan, extract, accumulate.

One :class:`MetadataAnalyzer` call owns its own object-name registry, so
separate runs (for example concurrent requests in a host service) never
share state. Files are processed one at a time in scan order; the only
suspension point is the optional progress callback.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Generator, Optional, Tuple, Union

from .config import DEFAULT_PROGRESS_LOG_INTERVAL
from .graph import GraphBuilder
from .models import AnalysisResult, AnalysisStats, FileCategory, MetadataFile, ParseResult
from .parser import ApexParser, AuraParser, CustomObjectParser, LWCParser
from .registry import ExtractionContext, ObjectRegistry
from .scanner import MetadataScanner

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Any]
Progress = Tuple[int, int]

_TEST_ANNOTATION = re.compile(r"@\s*isTest\b", re.IGNORECASE)


def is_test_class(content: str) -> bool:
    return _TEST_ANNOTATION.search(content) is not None


class MetadataAnalyzer:
    """Builds the dependency graph for one Salesforce source tree."""

    def __init__(
        self,
        scanner: Optional[MetadataScanner] = None,
        progress_log_interval: int = DEFAULT_PROGRESS_LOG_INTERVAL,
    ) -> None:
        self.scanner = scanner or MetadataScanner()
        self.object_parser = CustomObjectParser()
        self.apex_class_parser = ApexParser("ApexClass")
        self.apex_trigger_parser = ApexParser("ApexTrigger")
        self.lwc_parser = LWCParser()
        self.aura_parser = AuraParser()
        self.progress_log_interval = max(int(progress_log_interval), 1)

        self._handlers: Dict[FileCategory, Callable[[MetadataFile, ExtractionContext], Optional[ParseResult]]] = {
            FileCategory.CUSTOM_OBJECT: self._parse_custom_object,
            FileCategory.APEX_CLASS: self._parse_apex_class,
            FileCategory.APEX_TRIGGER: self._parse_apex_trigger,
            FileCategory.FLOW: self._index_only,
            FileCategory.LWC: self._parse_lwc,
            FileCategory.AURA: self._parse_aura,
        }
        missing = set(FileCategory) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for file categories: {sorted(c.value for c in missing)}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(
        self,
        source_dir: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Analyze *source_dir* synchronously.

        ``on_progress(processed, total)`` is called at 0, after every file and
        at completion. An awaitable return value is run to completion before
        the next file is processed. Inside a running event loop use
        :meth:`analyze_async` instead.
        """
        steps = self._run(Path(source_dir))
        while True:
            try:
                processed, total = next(steps)
            except StopIteration as stop:
                return stop.value
            if on_progress is not None:
                pending = on_progress(processed, total)
                if inspect.isawaitable(pending):
                    asyncio.run(_wait(pending))

    async def analyze_async(
        self,
        source_dir: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Like :meth:`analyze`, awaiting the callback when it returns an awaitable."""
        steps = self._run(Path(source_dir))
        while True:
            try:
                processed, total = next(steps)
            except StopIteration as stop:
                return stop.value
            if on_progress is not None:
                pending = on_progress(processed, total)
                if inspect.isawaitable(pending):
                    await pending

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------

    def _run(self, source_dir: Path) -> Generator[Progress, None, AnalysisResult]:
        logger.info("Scanning metadata in: %s", source_dir)
        files, indexes = self.scanner.scan(source_dir)
        total = len(files)
        logger.info("Found %d metadata files", total)

        registry = ObjectRegistry()
        for metadata_file in files:
            if metadata_file.category is FileCategory.CUSTOM_OBJECT:
                registry.register(metadata_file.name)
        context = ExtractionContext.from_indexes(registry, indexes)

        builder = GraphBuilder()
        processed = 0
        yield processed, total

        for metadata_file in files:
            try:
                result = self._handlers[metadata_file.category](metadata_file, context)
            except Exception as exc:
                logger.warning("Failed to parse %s: %s", metadata_file.path, exc)
                result = None

            if result is not None:
                builder.add_component(result.component)
                for dep in result.dependencies:
                    builder.add_dependency(dep)

            processed += 1
            if processed % self.progress_log_interval == 0:
                logger.debug("Processed %d/%d files...", processed, total)
            yield processed, total

        graph = builder.build()
        by_type = Counter(component.type for component in graph.components.values())
        stats = AnalysisStats(
            total_components=len(graph.components),
            components_by_type=dict(by_type),
            total_dependencies=len(graph.dependencies),
        )
        logger.info(
            "Analysis complete: %d components, %d dependencies",
            stats.total_components,
            stats.total_dependencies,
        )
        return AnalysisResult(graph=graph, stats=stats)

    # ------------------------------------------------------------------
    # Per-category handlers
    # ------------------------------------------------------------------

    def _parse_custom_object(self, metadata_file: MetadataFile, context: ExtractionContext) -> ParseResult:
        return self.object_parser.parse_file(metadata_file.path, context, metadata_file.name)

    def _parse_apex_class(self, metadata_file: MetadataFile, context: ExtractionContext) -> Optional[ParseResult]:
        content = metadata_file.path.read_text(encoding="utf-8")
        if is_test_class(content):
            logger.debug("Skipping test class %s", metadata_file.name)
            return None
        return self.apex_class_parser.parse(content, metadata_file.path, context, metadata_file.name)

    def _parse_apex_trigger(self, metadata_file: MetadataFile, context: ExtractionContext) -> ParseResult:
        return self.apex_trigger_parser.parse_file(metadata_file.path, context, metadata_file.name)

    def _parse_lwc(self, metadata_file: MetadataFile, context: ExtractionContext) -> ParseResult:
        return self.lwc_parser.parse_file(metadata_file.path, context, metadata_file.name)

    def _parse_aura(self, metadata_file: MetadataFile, context: ExtractionContext) -> ParseResult:
        return self.aura_parser.parse_file(metadata_file.path, context, metadata_file.name)

    @staticmethod
    def _index_only(metadata_file: MetadataFile, context: ExtractionContext) -> None:
        # Flows feed the flow-name index only; no flow extractor exists yet.
        return None


async def _wait(pending: Awaitable[Any]) -> Any:
    return await pending


def analyze(source_dir: Union[str, Path], on_progress: Optional[ProgressCallback] = None) -> AnalysisResult:
    """Convenience wrapper around :meth:`MetadataAnalyzer.analyze`."""
    return MetadataAnalyzer().analyze(source_dir, on_progress)
