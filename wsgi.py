"""
WSGI / Flask CLI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi seed-users
    flask --app wsgi db migrate -m "description"
    flask --app wsgi db upgrade
"""

from inovasi import create_app

app = create_app()
