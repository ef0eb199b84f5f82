"""Infrastructure layer — clock, scheduler, key-value storage, workspace.

The clock, scheduler, store, and database modules depend only on stdlib
and third-party libs (SQLAlchemy). The workspace composes them with the
plugin system for the service layer.
"""
