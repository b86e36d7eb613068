import use_cases.probe as probe_use_cases
import use_cases.record as record_use_cases
import use_cases.status as status_use_cases


def test_use_case_exports() -> None:
    assert "ResolveProbesUseCase" in probe_use_cases.__all__
    assert "AggregateCheckEntryUseCase" in record_use_cases.__all__
    assert record_use_cases.EnforceRetentionUseCase is not None
    assert status_use_cases.GetStatusHistoryUseCase is not None
