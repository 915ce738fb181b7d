"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8081
bind = f"0.0.0.0:{os.environ.get('PORT', '8081')}"

# Uvicorn async workers — each loads its own read-only copy of the CSV data.
# The store is never mutated after startup, so workers need no coordination.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

timeout = 60
graceful_timeout = 30
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()

wsgi_app = "savings_tracker.main:app"
