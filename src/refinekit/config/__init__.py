"""Configuration layer — settings and logging.

Nothing here runs on import; callers opt in via ``get_settings()`` and
``configure_logging()``.
"""
