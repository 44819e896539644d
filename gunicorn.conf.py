"""
Production Server Configuration

Run the BizManage Pro API with Uvicorn workers under Gunicorn.
With the default SQLite database keep WORKERS=1; use a server database for
more workers.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 10000
max_requests_jitter = 1000
# AI insight requests can take up to the client timeout
timeout = 120
keepalive = 5
graceful_timeout = 30

proc_name = "bizmanage-api"
daemon = False

# Logging
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = "-"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'


def when_ready(server):
    """Called when server is ready to receive connections."""
    server.log.info("BizManage Pro API ready on %s with %s workers", bind, workers)


def worker_abort(worker):
    """Called when worker receives SIGABRT signal (usually a timeout)."""
    worker.log.warning("Worker %s aborted", worker.pid)
