"""
main.py

Flask backend for CloudPix file storage with expiring, revocable share links.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, celery, python-jose
  - Infrastructure: Redis server, optionally a Google Cloud Storage bucket

Notes:
  - Uses Redis for file and share link records, Celery beat for cleanup
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Uses application factory pattern for better testability
"""

import logging
import os

from app_factory import create_app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "true").lower() == "true"

    app.run(host=host, port=port, debug=debug)
