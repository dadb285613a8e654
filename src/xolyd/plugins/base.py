# src/xolyd/plugins/base.py
"""Base class for plugin implementations.

The host calls execute(service_provider) once per triggering operation.
BasePlugin builds the traced Context, dumps the execution context to the
trace log, checks the operation is one the plugin was written for and only
then hands over to the subclass's handle().

    class ContactNamePlugin(BasePlugin):
        name = "contact_name"
        expected_entity = "contact"
        expected_messages = ("Create", "Update")

        def handle(self, context: Context) -> None:
            target = context.target
            ...

Guard behavior:
- expected_entity empty/None accepts every primary record type.
- expected_messages empty accepts every message.
- A mismatch writes one "Wrong entity"/"Wrong message" trace line and returns
  without calling handle().
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from xolyd.contracts.errors import ServiceResolutionError
from xolyd.core.canary import trace_context_with
from xolyd.core.config import TraceSettings
from xolyd.core.context import Context
from xolyd.core.logging import get_logger

if TYPE_CHECKING:
    from xolyd.contracts.host import OrganizationService, ServiceProvider

logger = get_logger(__name__)


class BasePlugin(ABC):
    """Base class for all host-invoked plugins."""

    name: ClassVar[str]

    # Primary record type the plugin handles; None accepts any
    expected_entity: ClassVar[str | None] = None

    # Messages the plugin handles; empty accepts any
    expected_messages: ClassVar[tuple[str, ...]] = ()

    # Create the organization service as the system user rather than the caller
    run_as_system: ClassVar[bool] = False

    plugin_version: ClassVar[str] = "0.0.0"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize with configuration.

        Args:
            config: Plugin configuration. The optional "trace" key holds
                TraceSettings for the entry dump.

        Raises:
            PluginConfigError: If the trace settings are invalid.
        """
        self.config = dict(config or {})
        self.trace_settings = TraceSettings.from_dict(self.config.get("trace", {}))

    def execute(self, service_provider: "ServiceProvider") -> None:
        """Host entry point."""
        context = Context.from_service_provider(service_provider, self.run_as_system)
        execution_context = context.plugin_execution_context
        query_service = self._query_service(context) if self.trace_settings.convert_queries else None
        trace_context_with(context, execution_context, self.trace_settings, query_service)

        log = logger.bind(
            plugin=self.name,
            message=execution_context.message_name,
            entity=execution_context.primary_entity_name,
        )

        if self.expected_entity and self.expected_entity != execution_context.primary_entity_name:
            log.info("plugin_skipped", reason="wrong_entity")
            context.trace(f"Wrong entity: {execution_context.primary_entity_name}")
            return

        if self.expected_messages and execution_context.message_name not in self.expected_messages:
            log.info("plugin_skipped", reason="wrong_message")
            context.trace(f"Wrong message: {execution_context.message_name}")
            return

        log.debug("plugin_handling")
        self.handle(context)

    def _query_service(self, context: Context) -> "OrganizationService | None":
        """Service for query translation in the entry dump, or None when unavailable.

        Queries are then rendered untranslated; handle() still fails on first
        use of the service.
        """
        try:
            return context.service
        except ServiceResolutionError as exc:
            logger.warning("query_service_unavailable", plugin=self.name, error=str(exc))
            return None

    @abstractmethod
    def handle(self, context: Context) -> None:
        """Plugin logic for an operation that passed the guard."""
        ...
