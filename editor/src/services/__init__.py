"""Persistence and orchestration services (image store, metadata, GC, projects, session)."""
