"""Dependency closure traversal, range resolution and snapshot assembly."""
