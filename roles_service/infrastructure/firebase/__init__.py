"""Firestore persistence (REST client, collections, repositories)."""
