"""Firestore repositories."""

from roles_service.infrastructure.firebase.repositories.role_repo_firestore import (
    FirestoreRoleRepository,
)

__all__ = ["FirestoreRoleRepository"]
