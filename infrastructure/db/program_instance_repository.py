"""
Supabase implementation of ProgramInstanceRepository.

Queries the program_instances table. Config, results and undo history are
stored as JSON columns next to the pinned definition id and version.
"""

import logging
from typing import Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseProgramInstanceRepository:
    """
    Supabase-backed program instance repository implementation.

    Columns:
    - id, user_id: identity and ownership
    - definition_id, definition_version: pinned definition revision
    - config, results, undo_history: JSON state replayed on every request
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, instance_id: str, user_id: str) -> Optional[Dict]:
        """
        Get an instance owned by a user.

        Args:
            instance_id: The instance's UUID as string
            user_id: Owner's user ID

        Returns:
            Instance dictionary if found, None otherwise
        """
        response = (
            self._client.table("program_instances")
            .select("*")
            .eq("id", instance_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def list_by_user(self, user_id: str, limit: int = 20, offset: int = 0) -> List[Dict]:
        """
        List a user's instances, newest first.

        Args:
            user_id: Owner's user ID
            limit: Maximum rows to return
            offset: Rows to skip

        Returns:
            Instance dictionaries
        """
        response = (
            self._client.table("program_instances")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return response.data if response.data else []

    def create(self, data: Dict) -> Dict:
        """
        Create a new instance.

        Args:
            data: Instance data dictionary

        Returns:
            Created instance dictionary with generated ID
        """
        response = (
            self._client.table("program_instances")
            .insert(data)
            .execute()
        )
        return response.data[0]

    def update(self, instance_id: str, data: Dict) -> Dict:
        """
        Update an existing instance.

        Args:
            instance_id: The instance's UUID as string
            data: Fields to update

        Returns:
            Updated instance dictionary
        """
        response = (
            self._client.table("program_instances")
            .update(data)
            .eq("id", instance_id)
            .execute()
        )
        return response.data[0]

    def delete(self, instance_id: str, user_id: str) -> bool:
        """
        Delete an instance owned by a user.

        Args:
            instance_id: The instance's UUID as string
            user_id: Owner's user ID

        Returns:
            True if a row was deleted, False otherwise
        """
        response = (
            self._client.table("program_instances")
            .delete()
            .eq("id", instance_id)
            .eq("user_id", user_id)
            .execute()
        )
        deleted = len(response.data) if response.data else 0
        if deleted == 0:
            logger.warning(f"No program instance {instance_id} for user {user_id} (0 rows deleted)")
            return False
        logger.info(f"Deleted program instance {instance_id}")
        return True
