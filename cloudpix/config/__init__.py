"""Environment-driven configuration for Redis, storage, share links and Celery."""
