"""
Annual Return Routes
====================

API endpoints for Annual Return data, field mappings and exports.

Version: 0.1.0
"""

from enum import Enum

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from services.charity_compliance.routes.dependencies import (
    api_rate_limit,
    export_rate_limit,
    get_annual_return_assembler,
)
from services.charity_compliance.services.annual_return import (
    AnnualReturnAssembler,
    export_fields_as_text,
    format_annual_return_csv,
    get_fields_by_section,
    map_annual_return_fields,
)
from shared.logging import get_logger
from shared.models.annual_return import AnnualReturnData, AnnualReturnField, ReturnSection


logger = get_logger(__name__)

router = APIRouter()


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    TEXT = "text"


@router.get(
    "/{organization_id}",
    response_model=AnnualReturnData,
    dependencies=[Depends(api_rate_limit)],
)
async def get_annual_return(
    organization_id: str,
    financial_year: int | None = Query(default=None, ge=2000, le=2100),
    assembler: AnnualReturnAssembler = Depends(get_annual_return_assembler),
) -> AnnualReturnData:
    """Aggregated Annual Return data for a financial year."""
    return await assembler.assemble(organization_id, financial_year)


@router.get(
    "/{organization_id}/fields",
    response_model=list[AnnualReturnField],
    dependencies=[Depends(api_rate_limit)],
)
async def get_annual_return_fields(
    organization_id: str,
    financial_year: int | None = Query(default=None, ge=2000, le=2100),
    section: ReturnSection | None = Query(default=None),
    assembler: AnnualReturnAssembler = Depends(get_annual_return_assembler),
) -> list[AnnualReturnField]:
    """Annual Return fields with copy-ready values, optionally for one section."""
    data = await assembler.assemble(organization_id, financial_year)
    return get_fields_by_section(map_annual_return_fields(data), section)


@router.get(
    "/{organization_id}/export",
    response_class=PlainTextResponse,
    dependencies=[Depends(export_rate_limit)],
)
async def export_annual_return(
    organization_id: str,
    financial_year: int | None = Query(default=None, ge=2000, le=2100),
    format: ExportFormat = Query(default=ExportFormat.CSV),
    assembler: AnnualReturnAssembler = Depends(get_annual_return_assembler),
) -> PlainTextResponse:
    """Download the Annual Return data as CSV or as "CODE: value" text."""
    data = await assembler.assemble(organization_id, financial_year)

    if format is ExportFormat.CSV:
        body = format_annual_return_csv(data)
        media_type = "text/csv"
        extension = "csv"
    else:
        body = export_fields_as_text(map_annual_return_fields(data))
        media_type = "text/plain"
        extension = "txt"

    logger.info(
        "annual_return_exported",
        organization_id=organization_id,
        financial_year=data.financial_year,
        format=format.value,
    )

    filename = f"annual-return-{data.financial_year}.{extension}"
    return PlainTextResponse(
        body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
