"""
SuiteQL query builder.

Renders the customer and contact existence queries. SuiteQL over REST has no
bind parameters, so values are interpolated as text: the email shape check and
the quote doubling below are the only protection for the interpolated value
and both must stay.

Dependencies: gateway.core
System role: Query text construction for existence checks
"""

from gateway.core.exceptions import InvalidEmailFormatError
from gateway.core.validation import is_valid_email

CUSTOMER_QUERY_TEMPLATE = """
SELECT
  Customer.entityid
FROM
  Customer
INNER JOIN
  CustomerSubsidiaryRelationship
ON
  Customer.id = CustomerSubsidiaryRelationship.entity
WHERE
  Customer.email = '{email}'
AND CustomerSubsidiaryRelationship.subsidiary = {subsidiary_id}
AND CustomerSubsidiaryRelationship.isprimarysub = 'T'
"""

CONTACT_QUERY_TEMPLATE = """
SELECT
  Contact.entityId
FROM
  Contact
WHERE
  Contact.email = '{email}'
"""


def sanitize_email(email: str) -> str:
    """
    Validate an email and escape it for a single-quoted SuiteQL literal.

    Args:
        email: Raw email

    Returns:
        str: Email with single quotes doubled

    Raises:
        InvalidEmailFormatError: If the email is not local@domain.tld
    """
    if not is_valid_email(email):
        raise InvalidEmailFormatError()
    return email.replace("'", "''")


class SuiteQLQueryBuilder:
    """Builds existence queries scoped to one subsidiary."""

    def __init__(self, subsidiary_id: int) -> None:
        self.subsidiary_id = int(subsidiary_id)

    def customer_query(self, email: str) -> str:
        """Query customers with this email whose primary subsidiary is ours."""
        return CUSTOMER_QUERY_TEMPLATE.format(
            email=sanitize_email(email),
            subsidiary_id=self.subsidiary_id,
        )

    def contact_query(self, email: str) -> str:
        """Query contacts with this email."""
        return CONTACT_QUERY_TEMPLATE.format(email=sanitize_email(email))
