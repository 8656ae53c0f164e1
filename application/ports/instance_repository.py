"""
Program instance repository port (interface).

An instance is one user's run through a pinned definition version. Rows
look like:

    {
        "id": str,
        "user_id": str,
        "definition_id": str,
        "definition_version": int,
        "config": {key: value},
        "results": [Outcome JSON, ...],
        "undo_history": [UndoEntry JSON, ...],
    }
"""

from typing import Dict, List, Optional, Protocol


class ProgramInstanceRepository(Protocol):
    """
    Repository interface for program instance persistence.

    All methods work with dictionaries; the use cases handle conversion
    to and from the domain models.
    """

    def get_by_id(self, instance_id: str, user_id: str) -> Optional[Dict]:
        """
        Get an instance owned by a user.

        Args:
            instance_id: The instance's UUID as string
            user_id: Owner's user ID

        Returns:
            Instance dictionary if found and owned by user, None otherwise
        """
        ...

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
        ...

    def create(self, data: Dict) -> Dict:
        """
        Create a new instance.

        Args:
            data: Instance data dictionary

        Returns:
            Created instance dictionary with generated ID
        """
        ...

    def update(self, instance_id: str, data: Dict) -> Dict:
        """
        Update an existing instance.

        Args:
            instance_id: The instance's UUID as string
            data: Fields to update

        Returns:
            Updated instance dictionary
        """
        ...

    def delete(self, instance_id: str, user_id: str) -> bool:
        """
        Delete an instance owned by a user.

        Args:
            instance_id: The instance's UUID as string
            user_id: Owner's user ID

        Returns:
            True if a row was deleted, False otherwise
        """
        ...
