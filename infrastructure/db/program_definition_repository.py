"""
Supabase implementation of ProgramDefinitionRepository.

Queries the program_definitions table. Each (id, version) pair is one
immutable revision; the JSON document lives in the "definition" column.
Revisions are only ever inserted.
"""

import logging
from typing import Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseProgramDefinitionRepository:
    """Supabase-backed program definition repository implementation."""

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, definition_id: str, version: Optional[int] = None) -> Optional[Dict]:
        """
        Get a definition revision.

        Args:
            definition_id: Definition slug
            version: Exact version; None loads the highest version

        Returns:
            Definition row if found, None otherwise
        """
        query = (
            self._client.table("program_definitions")
            .select("id, version, definition")
            .eq("id", definition_id)
        )
        if version is not None:
            query = query.eq("version", version)
        else:
            query = query.order("version", desc=True)

        response = query.limit(1).execute()
        return response.data[0] if response.data else None

    def list_latest(self, limit: int = 20, offset: int = 0) -> List[Dict]:
        """
        List the highest version of every definition.

        PostgREST has no DISTINCT ON, so revisions are read ordered by
        (id, version desc) and the first row per id is kept.

        Args:
            limit: Maximum rows to return
            offset: Rows to skip

        Returns:
            Definition rows ordered by id
        """
        response = (
            self._client.table("program_definitions")
            .select("id, version, definition")
            .order("id")
            .order("version", desc=True)
            .execute()
        )
        latest: Dict[str, Dict] = {}
        for row in response.data or []:
            latest.setdefault(row["id"], row)
        return list(latest.values())[offset:offset + limit]

    def create(self, data: Dict) -> Dict:
        """
        Insert a definition revision.

        Args:
            data: Row with "id", "version" and "definition"

        Returns:
            Created definition row
        """
        response = (
            self._client.table("program_definitions")
            .insert(data)
            .execute()
        )
        logger.info(f"Stored program definition {data['id']} v{data['version']}")
        return response.data[0]
