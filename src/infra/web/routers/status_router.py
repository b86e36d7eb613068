from datetime import date, datetime, timezone

from fastapi import APIRouter, HTTPException, status

from core.exceptions.configuration_error import ConfigurationError
from infra.adapter.daily_record_repository_factory import get_daily_record_repository
from infra.config.config import get_config
from infra.config.monitor_definition_loader import JsonMonitorDefinitionSource
from infra.schemas.daily_record import DailyRecordDocument
from infra.web.routers.schemas.status import StatusHistoryResponseDTO
from use_cases.status.get_status_history_use_case import GetStatusHistoryUseCase

router = APIRouter(prefix="/status", tags=["Status"])


def _today() -> date:
    return datetime.now(timezone.utc).date()


@router.get(
    "",
    response_model=StatusHistoryResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Current status and daily uptime history of every monitored component",
)
async def get_status_history() -> StatusHistoryResponseDTO:
    use_case = GetStatusHistoryUseCase(
        daily_record_repository=get_daily_record_repository(),
        definition_source=JsonMonitorDefinitionSource(get_config().MONITOR_CONFIG.DEFINITION_PATH),
    )

    try:
        history = await use_case.execute(_today())
    except ConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return StatusHistoryResponseDTO.from_domain(history)


@router.get(
    "/checks/{record_date}",
    response_model=DailyRecordDocument,
    status_code=status.HTTP_200_OK,
    summary="Raw daily record for one UTC date",
)
async def get_daily_record(record_date: date) -> DailyRecordDocument:
    record = await get_daily_record_repository().get(record_date)

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Daily record not found")

    return DailyRecordDocument.from_domain(record)
