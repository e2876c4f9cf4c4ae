"""
dupass Ingestion Module
=======================

Retrieval of identity risk data from the GraphQL API.

Components:
- auth.py: Client-credentials token exchange
- graphql_client.py: Query execution over HTTPS
- queries.py: The entity query document
- paginator.py: Cursor pagination across all result pages
"""

from .auth import Authenticator, AuthenticationError
from .graphql_client import GraphQLClient, QueryExecutionError
from .paginator import EntityPaginator
