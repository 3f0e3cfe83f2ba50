"""Application package for the education portal backend.

This package exposes the service, repository and model modules used by
the FastAPI application in `eduportal.main`. Individual modules contain
the concrete implementations and documentation.
"""
