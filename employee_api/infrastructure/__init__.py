"""Infrastructure layer for data persistence.

This package holds the concrete persistence implementation used by the
employee routes: the async SQLAlchemy engine and session lifecycle, the
declarative models and the repositories built on top of them.
"""
