# src/classflow/db/__init__.py
"""Database configuration and utilities."""

from .session import Base, SessionLocal, build_engine, build_session_factory, create_tables

__all__ = ["Base", "SessionLocal", "build_engine", "build_session_factory", "create_tables"]
