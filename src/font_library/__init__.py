"""Font Library Service Package.

This package provides the HTTP service that manages font families:
a Flask application (created by create_app) served by an embedded
Gunicorn through the ``font-library`` console script.

Usage:
    Start the server:
        $ poetry run font-library

    Test with curl:
        $ curl http://localhost:5000/wp/v2/font-families \
               -H "Authorization: Bearer $FONT_LIBRARY_ADMIN_TOKEN"

Key Components:
    create_app: Flask application factory
    main: Entry point function to start the Gunicorn server
"""
from .app import create_app
from .server import main

__all__ = ["create_app", "main"]
