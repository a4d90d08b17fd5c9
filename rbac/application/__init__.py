"""Application layer - Authorization engine orchestration.

RbacManager coordinates the persistence adapter, Hierarchy Graph and Rule
Registry, and owns the mutation/check concurrency policy.
"""
