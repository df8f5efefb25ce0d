"""
Gunicorn configuration for the progress tracker API.

Env vars that override defaults:
  PORT    : TCP port to bind
  WORKERS : number of worker processes (default: 2)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Must stay above WINDOW_TIMEOUT_SECONDS so a slow task API degrades to
# failed days instead of a killed worker.
timeout = 60

# Stdout only; application logs go to the same stream.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
