# Gunicorn configuration for Render.com
# Optimized for free tier (512MB RAM)

# Application factory
wsgi_app = "jobdesk.main:create_app()"

# Bind to the port provided by Render
bind = "0.0.0.0:10000"

# Use 1 worker to save memory (free tier has limited RAM)
workers = 1

# FastAPI is ASGI, so run it on uvicorn workers
worker_class = "uvicorn.workers.UvicornWorker"

# Gemini and platform calls are bounded by their own timeouts
timeout = 60

# Graceful timeout
graceful_timeout = 30

# Keep alive
keepalive = 5

# Log level
loglevel = "info"

# Access log
accesslog = "-"

# Error log
errorlog = "-"
