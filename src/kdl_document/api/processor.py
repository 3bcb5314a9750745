"""High level API for building, flattening and emitting KDL documents.

Module-level functions cover one-off use; :class:`KDLProcessor` keeps a
configuration and a builder for reuse across many documents and tracks usage
statistics.
"""

import io
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TextIO, TypeVar, Union

from kdl_document.emitter import TreeEmitter
from kdl_document.events import Event, KdlTextSink, RecordingSink, loads_events, read_events
from kdl_document.shared import KDLConfig, KDLError, get_logger
from kdl_document.tree import Document, TreeBuilder

# Constants for API operations
MS_PER_SECOND = 1000

T = TypeVar("T")


def parse_events(
    source: Iterable[Event],
    config: Optional[KDLConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Build a document from an event source.

    Examples:
        >>> doc = parse_events([Event.start_node("a"), Event.end_node(), Event.eof()])
        >>> doc.nodes[0].name
        'a'
    """
    config = config or KDLConfig()
    return TreeBuilder(config.builder, correlation_id).build(source)


def loads(
    text: str,
    config: Optional[KDLConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Build a document from JSON-lines event text."""
    return parse_events(loads_events(text), config, correlation_id)


def load_file(
    file_path: Union[str, Path],
    config: Optional[KDLConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Build a document from a JSON-lines event file."""
    path_obj = Path(file_path) if isinstance(file_path, str) else file_path
    with path_obj.open("r", encoding="utf-8") as handle:
        return parse_events(read_events(handle), config, correlation_id)


def flatten(document: Document, config: Optional[KDLConfig] = None) -> List[Event]:
    """Flatten ``document`` into its canonical event sequence, ending with ``EOF``."""
    config = config or KDLConfig()
    sink = RecordingSink()
    TreeEmitter(sink, config.emitter).emit_document(document)
    return sink.events


def dump(document: Document, stream: TextIO, config: Optional[KDLConfig] = None) -> None:
    """Write ``document`` to ``stream`` as canonical KDL text."""
    config = config or KDLConfig()
    TreeEmitter(KdlTextSink(stream, config.emitter), config.emitter).emit_document(document)


def dumps(document: Document, config: Optional[KDLConfig] = None) -> str:
    """Render ``document`` as canonical KDL text.

    Examples:
        >>> doc = Document().add_node(Node("host").add_argument(String("example1")))
        >>> dumps(doc)
        'host "example1"\\n'
    """
    buffer = io.StringIO()
    dump(document, buffer, config)
    return buffer.getvalue()


class KDLProcessor:
    """Reusable document processor with configuration and usage statistics.

    Errors are never swallowed: a failing build or emit raises after being
    counted.

    Examples:
        >>> processor = KDLProcessor(KDLConfig.kdl_v1())
        >>> doc = processor.build(events)
        >>> text = processor.emit(doc)
        >>> processor.statistics["successful_operations"]
        2
    """

    def __init__(
        self,
        config: Optional[KDLConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize processor.

        Args:
            config: Complete configuration (defaults to ``KDLConfig.canonical()``)
            correlation_id: Optional correlation ID; generated when correlation
                tracking is enabled and none is given
        """
        self.config = config or KDLConfig.canonical()
        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = uuid.uuid4().hex[:12]
        self.correlation_id = correlation_id

        self.logger = get_logger(__name__, self.correlation_id, "kdl_processor")
        self._builder = TreeBuilder(self.config.builder, self.correlation_id)

        self._operation_count = 0
        self._successful_operations = 0
        self._total_processing_time = 0.0
        self._events_processed = 0
        self._nodes_processed = 0

        self.logger.info(
            "KDLProcessor initialized",
            extra={"config_name": self.config.name}
        )

    def build(self, source: Union[Iterable[Event], str, Path]) -> Document:
        """Build a document from events, JSON-lines text or a JSON-lines file.

        A :class:`~pathlib.Path` is read from disk; a ``str`` is treated as
        JSON-lines text.
        """
        def _run() -> Document:
            if isinstance(source, Path):
                with source.open("r", encoding="utf-8") as handle:
                    return self._builder.build(read_events(handle))
            if isinstance(source, str):
                return self._builder.build(loads_events(source))
            return self._builder.build(source)

        document = self._track("build", _run)
        self._events_processed += self._builder.metrics.events_processed
        self._nodes_processed += self._builder.metrics.nodes_processed
        return document

    def flatten(self, document: Document) -> List[Event]:
        """Flatten ``document`` into its canonical event sequence."""
        def _run() -> List[Event]:
            sink = RecordingSink()
            TreeEmitter(sink, self.config.emitter, self.correlation_id).emit_document(document)
            return sink.events

        return self._track("flatten", _run)

    def emit(self, document: Document, stream: Optional[TextIO] = None) -> str:
        """Write canonical KDL text to ``stream``, or return it when no stream is given.

        Returns:
            The emitted text when writing to an internal buffer, else ``""``
        """
        target = stream if stream is not None else io.StringIO()

        def _run() -> None:
            sink = KdlTextSink(target, self.config.emitter)
            TreeEmitter(sink, self.config.emitter, self.correlation_id).emit_document(document)

        self._track("emit", _run)
        if stream is None:
            return target.getvalue()
        return ""

    def reconfigure(self, config: KDLConfig) -> None:
        """Replace the configuration and rebuild internal components."""
        self.config = config
        self._builder = TreeBuilder(self.config.builder, self.correlation_id)
        self.logger.info("Processor reconfigured", extra={"config_name": config.name})

    def _track(self, operation: str, func: Callable[[], T]) -> T:
        start_time = time.time()
        self._operation_count += 1
        try:
            result = func()
        except KDLError:
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND
            self.logger.error(
                f"Operation {operation} failed",
                extra={"operation": operation, "total_operations": self._operation_count}
            )
            raise

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._total_processing_time += processing_time
        self._successful_operations += 1
        self.logger.info(
            f"Operation {operation} completed",
            extra={"operation": operation, "processing_time_ms": processing_time}
        )
        return result

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get processor usage statistics."""
        return {
            "total_operations": self._operation_count,
            "successful_operations": self._successful_operations,
            "success_rate": (
                self._successful_operations / self._operation_count
                if self._operation_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._operation_count
                if self._operation_count > 0 else 0.0
            ),
            "events_processed": self._events_processed,
            "nodes_processed": self._nodes_processed,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset processor usage statistics."""
        self._operation_count = 0
        self._successful_operations = 0
        self._total_processing_time = 0.0
        self._events_processed = 0
        self._nodes_processed = 0

        self.logger.info("Processor statistics reset")
