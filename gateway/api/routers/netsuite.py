"""
NetSuite API endpoints.

Routes:
- POST /netsuite/customer/check - Check if customer or contact exists
- GET /netsuite/customer/{email}/exists - Check if customer exists
- GET /netsuite/contact/{email}/exists - Check if contact exists
- GET /netsuite/health - Health check for NetSuite integration

Dependencies: gateway.application.services, gateway.models
System role: NetSuite existence check HTTP API
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gateway.api.deps import get_customer_validation_service
from gateway.application.services.customer_validation_service import CustomerValidationService
from gateway.core.error_response import utc_timestamp
from gateway.core.exceptions import InvalidInputError
from gateway.models.netsuite import (
    CustomerCheckRequest,
    ExistenceResponse,
    HealthResponse,
    ValidationVerdict,
    parse_customer_check,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/netsuite", tags=["NetSuite"])


async def customer_check_request(request: Request) -> CustomerCheckRequest:
    """
    Parse and validate the customer check body.

    Args:
        request: Inbound request

    Returns:
        CustomerCheckRequest: Validated request

    Raises:
        InvalidInputError: If the body is not valid JSON or fails validation
    """
    try:
        raw = json.loads(await request.body() or b"null")
    except ValueError as e:
        raise InvalidInputError("Request body must be valid JSON") from e
    return parse_customer_check(raw)


@router.post(
    "/customer/check",
    response_model=ValidationVerdict,
    response_model_exclude_none=True,
    responses={400: {"description": "Invalid input data"}, 502: {"description": "NetSuite API error"}},
)
async def check_customer(
    payload: CustomerCheckRequest = Depends(customer_check_request),
    service: CustomerValidationService = Depends(get_customer_validation_service),
) -> JSONResponse:
    """Check if a customer or contact already exists in NetSuite for an email."""
    logger.info("Received customer check request", extra={"email": payload.company_email})

    verdict = await service.validate(payload.company_email)

    logger.info(
        "Customer check result",
        extra={"success": verdict.success, "error": verdict.error},
    )
    return JSONResponse(status_code=verdict.status_code, content=verdict.to_response_body())


@router.get("/customer/{email}/exists", response_model=ExistenceResponse)
async def check_customer_exists(
    email: str,
    service: CustomerValidationService = Depends(get_customer_validation_service),
) -> ExistenceResponse:
    """Return whether a customer exists for an email."""
    logger.info("Checking customer existence", extra={"email": email})

    exists = await service.check_customer_exists(email)
    return ExistenceResponse(exists=exists, email=email)


@router.get("/contact/{email}/exists", response_model=ExistenceResponse)
async def check_contact_exists(
    email: str,
    service: CustomerValidationService = Depends(get_customer_validation_service),
) -> ExistenceResponse:
    """Return whether a contact exists for an email."""
    logger.info("Checking contact existence", extra={"email": email})

    exists = await service.check_contact_exists(email)
    return ExistenceResponse(exists=exists, email=email)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check for the NetSuite integration."""
    return HealthResponse(status="OK", timestamp=utc_timestamp())
