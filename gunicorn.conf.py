# Gunicorn configuration for the ChartScribe API
import os
import sys

# Add src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

wsgi_app = "chartscribe.app:app"

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', 8000)}"
backlog = 2048

# Review, capture and pipeline sessions live in process memory; keep one worker
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
# A CDI pass is one blocking completion call with a 4000-token budget
timeout = 120
keepalive = 2

max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Process naming
proc_name = "chartscribe-backend"

# Server mechanics
preload_app = True
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None
