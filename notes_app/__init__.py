"""
Notes Application.

- backend/: REST API, persistence, configuration and logging
"""
