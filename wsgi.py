"""
WSGI entrypoint for production servers (gunicorn/uwsgi).

The server imports `app` from this module to obtain the Flask application
object created by the application factory. Run a single worker process: each
process holds its own in-memory address store.
"""

from address_picker import create_app

app = create_app()
