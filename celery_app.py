"""
Celery Application Instance

Creates the Celery app instance for use by workers and beat scheduler.
Uses the app factory to ensure all services are properly initialized.
"""

from app_factory import create_app

# Create Flask app with all services initialized (including dependency container)
flask_app = create_app()

# Get Celery instance from Flask app
celery_app = flask_app.celery

# Task modules are registered by name; the worker imports them once
# `celery_app` exists, so the task decorators can bind to it.
celery_app.conf.imports = ("cloudpix.tasks.cleanup_task",)
