"""
Local development entry point.

Creates the Flask app via create_app() and runs the dev server on port 5000,
where the picker page expects the store API (/api). Keeps startup simple and
avoids embedding app logic here.
"""

from address_picker import create_app

app = create_app()

if __name__ == "__main__":
    # For local dev only; use a proper WSGI server in production.
    # Single process: the address store lives in this process's memory.
    app.run(debug=True, port=5000)
