from pathlib import Path

import structlog
from pydantic import ValidationError

from core.domain.monitor_definition import (
    ComponentDefinition,
    DirectSource,
    ExternalDefinition,
    GroupDefinition,
    MonitorDefinition,
    TemplatedSource,
)
from core.domain.probe_spec import FieldEquals
from core.exceptions.configuration_error import ConfigurationError
from core.port.monitor_definition_source import MonitorDefinitionSource
from infra.schemas.monitor_document import ComponentDocument, MonitorDocument

logger = structlog.stdlib.get_logger(__name__)


class JsonMonitorDefinitionSource(MonitorDefinitionSource):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> MonitorDefinition:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"cannot read monitor definition ({e.strerror or e})", str(self.path)) from e

        try:
            document = MonitorDocument.model_validate_json(raw)
        except ValidationError as e:
            raise ConfigurationError(f"invalid monitor definition: {e}", str(self.path)) from e

        definition = self._to_domain(document)

        logger.debug(
            f"Loaded monitor definition from {self.path} "
            f"({len(definition.groups)} groups, {len(definition.external)} external dependencies)"
        )

        return definition

    def _to_domain(self, document: MonitorDocument) -> MonitorDefinition:
        return MonitorDefinition(
            base_url=document.base_url,
            test_lat=document.test_lat,
            test_lon=document.test_lon,
            groups=tuple(
                GroupDefinition(
                    id=group.id,
                    name=group.name,
                    description=group.description,
                    components=tuple(self._component_to_domain(component) for component in group.components),
                )
                for group in document.groups
            ),
            external=tuple(
                ExternalDefinition(
                    id=external.id,
                    name=external.name,
                    url=external.url,
                    timeout_ms=external.timeout,
                )
                for external in document.external
            ),
        )

    def _component_to_domain(self, component: ComponentDocument) -> ComponentDefinition:
        # an absolute url wins over an endpoint when both are declared
        if component.url:
            source = DirectSource(url=component.url)
        else:
            source = TemplatedSource(endpoint=component.endpoint or "", use_coordinates=component.params)

        validation = None
        if component.validation is not None:
            validation = FieldEquals(field=component.validation.field, value=component.validation.value)

        return ComponentDefinition(
            id=component.id,
            name=component.name,
            source=source,
            timeout_ms=component.timeout,
            validation=validation,
            expected_status_codes=tuple(component.expected_status_codes),
        )
