"""
Program definition repository port (interface).

Definitions are versioned: creating a definition stores a new revision and
never edits an existing one. Rows look like {"id", "version", "definition"} where "definition" holds the
JSON document validated by models.ProgramDefinition.
"""

from typing import Dict, List, Optional, Protocol


class ProgramDefinitionRepository(Protocol):
    """Access to stored program definition revisions."""

    def get_by_id(self, definition_id: str, version: Optional[int] = None) -> Optional[Dict]:
        """
        Get a program definition row.

        Args:
            definition_id: Definition slug (e.g. "gzclp")
            version: Exact version to load; None loads the latest

        Returns:
            Definition row if found, None otherwise
        """
        ...

    def list_latest(self, limit: int = 20, offset: int = 0) -> List[Dict]:
        """
        List the highest version of every definition, ordered by id.

        Args:
            limit: Maximum rows to return
            offset: Rows to skip

        Returns:
            Definition rows, one per definition id
        """
        ...

    def create(self, data: Dict) -> Dict:
        """
        Store a new definition revision.

        Args:
            data: Row with "id", "version" and "definition"

        Returns:
            Created definition row
        """
        ...
