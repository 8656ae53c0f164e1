"""
Fake program instance repository for testing.

This fake implementation stores data in memory and provides
helper methods for test setup and verification.
"""

import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4


class FakeProgramInstanceRepository:
    """
    In-memory fake implementation of ProgramInstanceRepository.

    Provides the same interface as SupabaseProgramInstanceRepository
    but stores data in dictionaries for fast, isolated testing. Rows are
    deep-copied on the way in and out to mimic a JSON column round trip.
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._instances: Dict[str, Dict] = {}
        self.update_calls: int = 0

    # -------------------------------------------------------------------------
    # Test Helpers
    # -------------------------------------------------------------------------

    def seed(self, instances: List[Dict]) -> None:
        """
        Seed the repository with test data.

        Args:
            instances: List of instance dictionaries to add
        """
        for instance in instances:
            instance_id = instance.get("id", str(uuid4()))
            self._instances[instance_id] = copy.deepcopy({**instance, "id": instance_id})

    def reset(self) -> None:
        """Clear all stored data."""
        self._instances.clear()
        self.update_calls = 0

    def get_all(self) -> List[Dict]:
        """Get all stored instances (for test verification)."""
        return copy.deepcopy(list(self._instances.values()))

    def count(self) -> int:
        """Get count of stored instances."""
        return len(self._instances)

    # -------------------------------------------------------------------------
    # Repository Interface Implementation
    # -------------------------------------------------------------------------

    def get_by_id(self, instance_id: str, user_id: str) -> Optional[Dict]:
        """
        Get an instance owned by a user.

        Args:
            instance_id: The instance's UUID as string
            user_id: Owner's user ID

        Returns:
            Instance dictionary if found and owned by user, None otherwise
        """
        instance = self._instances.get(instance_id)
        if instance is None or instance.get("user_id") != user_id:
            return None
        return copy.deepcopy(instance)

    def list_by_user(self, user_id: str, limit: int = 20, offset: int = 0) -> List[Dict]:
        """List a user's instances, newest first."""
        results = [
            copy.deepcopy(instance)
            for instance in self._instances.values()
            if instance.get("user_id") == user_id
        ]
        results.sort(key=lambda i: i.get("created_at", ""), reverse=True)
        return results[offset:offset + limit]

    def create(self, data: Dict) -> Dict:
        """
        Create a new instance.

        Args:
            data: Instance data dictionary

        Returns:
            Created instance dictionary with generated ID
        """
        instance_id = data.get("id", str(uuid4()))
        now = datetime.now(timezone.utc).isoformat()
        instance = {
            **copy.deepcopy(data),
            "id": instance_id,
            "created_at": now,
            "updated_at": now,
        }
        self._instances[instance_id] = instance
        return copy.deepcopy(instance)

    def update(self, instance_id: str, data: Dict) -> Dict:
        """
        Update an existing instance.

        Args:
            instance_id: The instance's UUID as string
            data: Fields to update

        Returns:
            Updated instance dictionary

        Raises:
            KeyError: If instance not found
        """
        if instance_id not in self._instances:
            raise KeyError(f"Instance {instance_id} not found")

        self.update_calls += 1
        updated = {
            **self._instances[instance_id],
            **copy.deepcopy(data),
            "id": instance_id,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._instances[instance_id] = updated
        return copy.deepcopy(updated)

    def delete(self, instance_id: str, user_id: str) -> bool:
        """Delete an instance owned by a user."""
        instance = self._instances.get(instance_id)
        if instance and instance.get("user_id") == user_id:
            del self._instances[instance_id]
            return True
        return False
