from use_cases.probe.resolve_probes_use_case import ResolveProbesUseCase

__all__ = ["ResolveProbesUseCase"]
