"""Shared middleware for cross-cutting concerns.

This module contains the request-scoped tenant context carrier that every
bounded context reads when it touches tenant-scoped data. Resolution of the
tenant from a verified credential lives in the IAM dependency layer.
"""
