"""
Customer validation service orchestrator.

Checks NetSuite for existing customers and contacts by email and reduces the
two checks to one verdict.

Dependencies: gateway.boundary.netsuite, gateway.models
System role: Customer/contact existence use case orchestration
"""

import asyncio
import logging

from gateway.boundary.netsuite.query_builder import SuiteQLQueryBuilder
from gateway.boundary.netsuite.suiteql_client import SuiteQLClient
from gateway.core.exceptions import UpstreamError
from gateway.models.netsuite import ExistenceData, ValidationVerdict

logger = logging.getLogger(__name__)

CUSTOMER_EXISTS_ERROR = "Customer already exists in NetSuite"
CONTACT_EXISTS_ERROR = "Contact already exists in NetSuite"
NO_MATCH_MESSAGE = "No existing customer or contact found"


class CustomerValidationService:
    """Customer/contact existence checks against NetSuite."""

    def __init__(self, client: SuiteQLClient, query_builder: SuiteQLQueryBuilder) -> None:
        """
        Initialize service.

        Args:
            client: Signed SuiteQL client
            query_builder: Query builder scoped to the configured subsidiary
        """
        self.client = client
        self.query_builder = query_builder

    async def check_customer_exists(self, email: str) -> bool:
        """
        Check whether a customer with this email exists in our subsidiary.

        Args:
            email: Customer email

        Returns:
            bool: True if at least one customer matched

        Raises:
            InvalidEmailFormatError: If the email is malformed (no query is sent)
            UpstreamError: If the SuiteQL call fails
        """
        try:
            query = self.query_builder.customer_query(email)
            result = await self.client.execute(query)
            return result.count > 0
        except Exception as e:
            logger.error(
                "Error checking customer existence",
                extra={"email": email, "error": str(e)},
            )
            raise

    async def check_contact_exists(self, email: str) -> bool:
        """
        Check whether a contact with this email exists.

        Args:
            email: Contact email

        Returns:
            bool: True if at least one contact matched

        Raises:
            InvalidEmailFormatError: If the email is malformed (no query is sent)
            UpstreamError: If the SuiteQL call fails
        """
        try:
            query = self.query_builder.contact_query(email)
            result = await self.client.execute(query)
            return result.count > 0
        except Exception as e:
            logger.error(
                "Error checking contact existence",
                extra={"email": email, "error": str(e)},
            )
            raise

    async def validate(self, email: str) -> ValidationVerdict:
        """
        Validate that neither a customer nor a contact exists for an email.

        Both checks are issued before either is awaited, and both are awaited
        even if one fails, so the verdict reports both booleans. Never raises.

        Args:
            email: Company email

        Returns:
            ValidationVerdict: Success when no match, otherwise a failure
                naming what exists or what went wrong
        """
        logger.info("Validating customer and contact", extra={"email": email})

        customer_result, contact_result = await asyncio.gather(
            self.check_customer_exists(email),
            self.check_contact_exists(email),
            return_exceptions=True,
        )

        for outcome in (customer_result, contact_result):
            if isinstance(outcome, BaseException):
                return self._error_verdict(outcome)

        return self.reduce(customer_result, contact_result)

    @staticmethod
    def reduce(customer_exists: bool, contact_exists: bool) -> ValidationVerdict:
        """
        Combine the two existence results. Customer match takes precedence.

        Args:
            customer_exists: Customer check result
            contact_exists: Contact check result

        Returns:
            ValidationVerdict: Reduced verdict
        """
        if customer_exists:
            return ValidationVerdict(
                success=False,
                error=CUSTOMER_EXISTS_ERROR,
                data=ExistenceData(customer_exists=True, contact_exists=contact_exists),
            )

        if contact_exists:
            return ValidationVerdict(
                success=False,
                error=CONTACT_EXISTS_ERROR,
                data=ExistenceData(customer_exists=False, contact_exists=True),
            )

        return ValidationVerdict(
            success=True,
            message=NO_MATCH_MESSAGE,
            data=ExistenceData(customer_exists=False, contact_exists=False),
        )

    @staticmethod
    def _error_verdict(exc: BaseException) -> ValidationVerdict:
        logger.error("Error validating customer and contact", extra={"error": str(exc)})

        # Transport-level upstream failures keep their 502/504 status
        status_code = exc.status_code if isinstance(exc, UpstreamError) else 200
        message = getattr(exc, "message", None) or str(exc)
        return ValidationVerdict(
            success=False,
            error=f"An error occurred while querying NetSuite: {message}",
            status_code=status_code,
        )
