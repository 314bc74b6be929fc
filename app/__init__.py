"""Friendship request service backend."""
