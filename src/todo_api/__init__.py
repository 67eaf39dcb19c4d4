"""
FastAPI Todo API package.

A thin CRUD service over a single SQLite ``todos`` table. The application is
built by ``todo_api.main.create_app``, which reads its settings from the
environment when none are passed.
"""

__version__ = "1.0.0"
