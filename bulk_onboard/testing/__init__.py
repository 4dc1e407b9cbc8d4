"""
Public test utilities for bulk-onboard.
"""

from .harness import ImportGraphQLTestClient, build_request
from .stores import InMemoryEntityStore

__all__ = ["ImportGraphQLTestClient", "InMemoryEntityStore", "build_request"]
