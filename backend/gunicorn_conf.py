# Gunicorn configuration for the AccuBooks API
import multiprocessing
import os

wsgi_app = "accubooks_project.wsgi:application"
bind = os.environ.get("ACCUBOOKS_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("ACCUBOOKS_WORKERS", multiprocessing.cpu_count() * 2 + 1))
# Assistant requests wait on OpenAI, retries included
timeout = 180
accesslog = "-"
errorlog = "-"
loglevel = "info"
