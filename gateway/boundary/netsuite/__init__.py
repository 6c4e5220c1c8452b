"""NetSuite SuiteQL boundary: query rendering and signed execution."""

from gateway.boundary.netsuite.query_builder import SuiteQLQueryBuilder
from gateway.boundary.netsuite.suiteql_client import SigningCredentials, SuiteQLClient

__all__ = ["SigningCredentials", "SuiteQLClient", "SuiteQLQueryBuilder"]
