from core.domain.monitor_definition import (
    ComponentDefinition,
    DirectSource,
    ExternalDefinition,
    MonitorDefinition,
    TemplatedSource,
)
from core.domain.probe_spec import DEFAULT_ACCEPTED_STATUS_CODES, ProbeSpec
from core.exceptions.configuration_error import ConfigurationError
from core.exceptions.duplicate_probe_id_error import DuplicateProbeIdError


def _format_coordinate(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))

    return repr(float(value))


class ResolveProbesUseCase:
    """Flattens a monitor definition into the probes of one run.

    Group components come first, in declaration order, followed by the
    external dependencies. Nothing here touches the network.
    """

    def execute(self, definition: MonitorDefinition) -> list[ProbeSpec]:
        probes: list[ProbeSpec] = []

        for group in definition.groups:
            for component in group.components:
                probes.append(self._component_probe(definition, component))

        for external in definition.external:
            probes.append(self._external_probe(external))

        seen: set[str] = set()
        for probe in probes:
            if probe.id in seen:
                raise DuplicateProbeIdError(probe.id)

            seen.add(probe.id)

        return probes

    def _component_probe(self, definition: MonitorDefinition, component: ComponentDefinition) -> ProbeSpec:
        source = component.source

        if isinstance(source, DirectSource):
            url = source.url
        elif isinstance(source, TemplatedSource):
            url = f"{definition.base_url.rstrip('/')}{source.endpoint}"

            if source.use_coordinates:
                separator = "&" if "?" in url else "?"
                url = (
                    f"{url}{separator}lat={_format_coordinate(definition.test_lat)}"
                    f"&lon={_format_coordinate(definition.test_lon)}"
                )
        else:
            raise ConfigurationError(f"Unsupported probe source for component '{component.id}'")

        return self._build(
            probe_id=component.id,
            name=component.name,
            url=url,
            timeout_ms=component.timeout_ms,
            accepted_status_codes=frozenset(component.expected_status_codes),
            validation=component.validation,
        )

    def _external_probe(self, external: ExternalDefinition) -> ProbeSpec:
        return self._build(
            probe_id=external.id,
            name=external.name,
            url=external.url,
            timeout_ms=external.timeout_ms,
            accepted_status_codes=DEFAULT_ACCEPTED_STATUS_CODES,
            validation=None,
        )

    def _build(self, probe_id: str, **kwargs) -> ProbeSpec:
        try:
            return ProbeSpec(id=probe_id, **kwargs)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
