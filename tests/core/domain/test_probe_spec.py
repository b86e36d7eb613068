import pytest

from core.domain.probe_spec import FieldEquals, ProbeSpec


def test_probe_spec_defaults() -> None:
    probe = ProbeSpec(id="api", name="API", url="https://api.example.com/health")

    assert probe.timeout_ms == 10_000
    assert probe.timeout_seconds == 10.0
    assert probe.accepted_status_codes == frozenset({200})
    assert probe.validation is None
    assert probe.degraded_threshold_ms == 5_000


def test_probe_spec_normalizes_status_codes_to_frozenset() -> None:
    probe = ProbeSpec(id="api", name="API", url="https://api.example.com", accepted_status_codes=[200, 204, 204])

    assert probe.accepted_status_codes == frozenset({200, 204})
    assert probe.accepts(204) is True
    assert probe.accepts(500) is False


def test_probe_spec_is_immutable() -> None:
    probe = ProbeSpec(id="api", name="API", url="https://api.example.com")

    with pytest.raises(AttributeError):
        probe.url = "https://other.example.com"  # type: ignore[misc]


@pytest.mark.parametrize("url", ["api.example.com", "http:/broken", "https://"])
def test_probe_spec_rejects_invalid_urls(url: str) -> None:
    with pytest.raises(ValueError, match="Invalid URL"):
        ProbeSpec(id="api", name="API", url=url)


def test_probe_spec_rejects_non_http_scheme() -> None:
    with pytest.raises(ValueError, match="URL must use http or https"):
        ProbeSpec(id="api", name="API", url="ftp://api.example.com/health")


def test_probe_spec_rejects_empty_status_codes_and_bad_timeout() -> None:
    with pytest.raises(ValueError, match="at least one status code"):
        ProbeSpec(id="api", name="API", url="https://api.example.com", accepted_status_codes=frozenset())

    with pytest.raises(ValueError, match="must be positive"):
        ProbeSpec(id="api", name="API", url="https://api.example.com", timeout_ms=0)


def test_field_equals_uses_exact_string_equality() -> None:
    rule = FieldEquals(field="ok", value="true")

    assert rule.matches({"ok": "true"}) is True
    assert rule.matches({"ok": "false"}) is False
    assert rule.matches({"ok": True}) is False
    assert rule.matches({}) is False
    assert rule.matches(["ok", "true"]) is False
    assert rule.matches(None) is False
