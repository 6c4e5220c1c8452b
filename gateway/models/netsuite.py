"""
NetSuite gateway models and schemas.

SuiteQL result shape, customer check request/response contracts and the
request parsing step that turns a raw JSON body into a validated request.

Dependencies: pydantic
System role: NetSuite API contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from gateway.core.exceptions import InvalidInputError
from gateway.core.validation import is_valid_email


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueryResult(CamelModel):
    """Raw SuiteQL response page. Only count is inspected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    count: int = Field(default=0, ge=0)
    has_more: bool = False
    items: list[Any] = Field(default_factory=list)
    links: list[Any] = Field(default_factory=list)
    offset: int = 0
    total_results: int = 0


class CustomerCheckRequest(CamelModel):
    """Request schema for the customer/contact check."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    company_email: str = Field(..., min_length=1, description="Company email to check in NetSuite")

    @field_validator("company_email")
    @classmethod
    def must_be_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("companyEmail must be an email")
        return value


class ExistenceData(CamelModel):
    """Outcome of both existence checks."""

    customer_exists: bool
    contact_exists: bool


class ValidationVerdict(CamelModel):
    """Reduced result of the customer and contact existence checks."""

    success: bool
    message: str | None = None
    error: str | None = None
    data: ExistenceData | None = None
    # HTTP status the verdict is served with; never serialized
    status_code: int = Field(default=200, exclude=True)

    def to_response_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ExistenceResponse(BaseModel):
    """Response schema for single existence lookups."""

    exists: bool
    email: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str


def parse_customer_check(raw: Any) -> CustomerCheckRequest:
    """
    Validate a decoded JSON body as a customer check request.

    Args:
        raw: Decoded request body

    Returns:
        CustomerCheckRequest: Validated request

    Raises:
        InvalidInputError: If the body is not an object, has unknown fields or
            the email is missing or malformed
    """
    if not isinstance(raw, dict):
        raise InvalidInputError("Request body must be a JSON object")

    try:
        return CustomerCheckRequest.model_validate(raw)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidInputError(
            "Invalid request data",
            details={"validationErrors": errors},
        ) from e
