"""
SWIFT Code Routes - lookup, country listing, add and delete.

Endpoints:
- GET    /swift-codes/{swift_code}           : Bank details (+ branches for HQs)
- GET    /swift-codes/country/{country_iso2} : Every bank in a country
- POST   /swift-codes/                       : Add a bank
- DELETE /swift-codes/{swift_code}           : Delete a bank

Branch and country listings come from the scatter-gather aggregator. When
some records could not be fetched the response is 206 Partial Content and
lists the failures under "warnings".
"""
from typing import Union

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_record_rules, get_service
from src.core.logging_config import get_logger
from src.core.validators import RecordRules
from src.models.bank import (
    BankCreateRequest,
    BankDetailsSchema,
    CountryResponse,
    ErrorResponse,
    HeadquartersResponse,
    MessageResponse,
)
from src.services.directory_service import DirectoryService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/swift-codes",
    tags=["SWIFT Codes"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed input"},
    404: {"model": ErrorResponse, "description": "SWIFT code not found"},
    504: {"model": ErrorResponse, "description": "Aggregation deadline exceeded"},
}


@router.get(
    "/country/{country_iso2}",
    response_model=CountryResponse,
    response_model_by_alias=True,
    responses={
        206: {"model": CountryResponse, "description": "Some banks could not be retrieved"},
        400: ERROR_RESPONSES[400],
        504: ERROR_RESPONSES[504],
    },
    summary="List banks by country",
    description="""
    Returns every SWIFT code registered under an ISO 3166-1 alpha-2 code.

    The code is case-insensitive. A code that is not an assigned ISO 3166-1
    country is rejected with 400. A known country with no banks yields an
    empty list.
    """
)
async def get_banks_by_country(
    country_iso2: str,
    response: Response,
    service: DirectoryService = Depends(get_service),
    rules: RecordRules = Depends(get_record_rules),
) -> CountryResponse:
    """Resolve a country's banks."""
    country_code = rules.validate_country_code(country_iso2.upper())

    context = service.new_context()
    result = await run_in_threadpool(service.resolve_country, country_code, context)

    if result.is_partial:
        response.status_code = status.HTTP_206_PARTIAL_CONTENT

    return CountryResponse.from_result(
        country_code, rules.country_name(country_code), result
    )


@router.get(
    "/{swift_code}",
    response_model=None,
    responses={
        200: {"model": HeadquartersResponse, "description": "Bank details (branches only for headquarters)"},
        206: {"model": HeadquartersResponse, "description": "Some branches could not be retrieved"},
        **ERROR_RESPONSES,
    },
    summary="Get bank details by SWIFT code",
    description="""
    Returns the bank stored under a SWIFT code. Headquarters (codes ending
    in XXX) also list every branch sharing their first 8 characters.
    """
)
async def get_bank(
    swift_code: str,
    response: Response,
    service: DirectoryService = Depends(get_service),
    rules: RecordRules = Depends(get_record_rules),
) -> Union[HeadquartersResponse, BankDetailsSchema]:
    """Look up a bank, with branches for headquarters."""
    rules.validate_swift_code(swift_code)

    context = service.new_context()
    lookup = await run_in_threadpool(service.lookup, swift_code, context)

    if lookup.branches is None:
        return BankDetailsSchema.from_record(lookup.bank)

    if lookup.is_partial:
        response.status_code = status.HTTP_206_PARTIAL_CONTENT

    return HeadquartersResponse.from_lookup(lookup.bank, lookup.branches)


@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: ERROR_RESPONSES[400],
        409: {"model": ErrorResponse, "description": "SWIFT code already exists"},
    },
    summary="Add bank data",
    description="""
    Adds a bank record. countryISO2 must match the SWIFT code, countryName
    must be the country's canonical name, and isHeadquarter must agree with
    the XXX suffix.
    """
)
async def add_bank(
    payload: BankCreateRequest,
    service: DirectoryService = Depends(get_service),
    rules: RecordRules = Depends(get_record_rules),
) -> MessageResponse:
    """Validate and store a new bank record."""
    record = rules.validate_record(**payload.model_dump())

    await run_in_threadpool(service.add_bank, record)

    return MessageResponse(message="bank data successfully added")


@router.delete(
    "/{swift_code}",
    response_model=MessageResponse,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
    summary="Delete bank data",
    description="Deletes the bank stored under a SWIFT code."
)
async def delete_bank(
    swift_code: str,
    service: DirectoryService = Depends(get_service),
    rules: RecordRules = Depends(get_record_rules),
) -> MessageResponse:
    """Delete a bank record."""
    rules.validate_swift_code(swift_code)

    await run_in_threadpool(service.delete_bank, swift_code)

    return MessageResponse(message="bank data successfully deleted")
