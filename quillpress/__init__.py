"""
Quillpress - A Flask Blogging Platform Backend
==============================================

A modular REST backend for a blog with:
- JWT authentication (the first registered user becomes admin)
- Posts with slugs, drafts and tags
- Newsletter subscriptions with spreadsheet export
- Image uploads to S3-compatible object storage
- Product documentation (products -> sections -> pages)

Usage:
    from flask import Flask
    from quillpress import Quillpress

    app = Flask(__name__)
    quillpress = Quillpress(app, {'features': {'documentation': False}})

Or let Quillpress build the app:
    from quillpress import create_app
    app = create_app()
"""

import logging

import click
from flask import Flask
from flask_cors import CORS

from .core.config import Config
from .core.database import db, init_database
from .core.errors import register_error_handlers
from .core.logging_service import LoggingService
from .core.seed import seed_sample_data

__version__ = '0.1.0'
__author__ = 'Quillpress Contributors'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'auth': True,
    'posts': True,
    'tags': True,
    'newsletter': True,
    'upload': True,
    'documentation': True,
    'ops': True,
}


def _load_models():
    """Import every model so relationships resolve and create_all() sees all tables"""
    from .core import logging_service  # noqa: F401
    from .modules.auth import models as auth_models  # noqa: F401
    from .modules.posts import models as posts_models  # noqa: F401
    from .modules.tags import models as tags_models  # noqa: F401
    from .modules.newsletter import models as newsletter_models  # noqa: F401
    from .modules.documentation import models as documentation_models  # noqa: F401


def _feature_blueprints():
    from .modules.auth import auth_bp
    from .modules.documentation import documentation_bp
    from .modules.newsletter import newsletter_bp
    from .modules.ops import ops_health_bp
    from .modules.posts import posts_bp
    from .modules.tags import tags_bp
    from .modules.upload import upload_bp

    return {
        'auth': auth_bp,
        'posts': posts_bp,
        'tags': tags_bp,
        'newsletter': newsletter_bp,
        'upload': upload_bp,
        'documentation': documentation_bp,
        'ops': ops_health_bp,
    }


class Quillpress:
    """Flask extension wiring the Quillpress modules into an app.

    Options:
        features: dict of feature name -> bool; every feature is on unless
            switched off here.
    """

    def __init__(self, app=None, options=None):
        self.options = options or {}
        self.features = dict(DEFAULT_FEATURES)
        self.features.update(self.options.get('features', {}))
        self.registered_modules = []

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        for key, value in Config.as_dict().items():
            app.config.setdefault(key, value)

        init_database(app)
        CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGIN']}},
             supports_credentials=True)
        register_error_handlers(app)

        _load_models()

        for name, blueprint in _feature_blueprints().items():
            if self.features.get(name):
                app.register_blueprint(blueprint)
                self.registered_modules.append(name)

        with app.app_context():
            db.create_all()

        self._register_commands(app)

        app.extensions['quillpress'] = self
        logger.info(f"Quillpress initialised with modules: {', '.join(self.registered_modules)}")

    def get_registered_modules(self):
        return list(self.registered_modules)

    @staticmethod
    def _register_commands(app):

        @app.cli.command('init-db')
        def init_db_command():
            """Create all database tables."""
            db.create_all()
            click.echo('Database tables created.')

        @app.cli.command('cleanup-logs')
        @click.option('--days', default=30, show_default=True, help='Days of logs to keep.')
        def cleanup_logs_command(days):
            """Delete app_logs entries older than --days."""
            deleted = LoggingService.cleanup_old_logs(days_to_keep=days)
            click.echo(f'Removed {deleted} log entries.')

        @app.cli.command('seed-db')
        def seed_db_command():
            """Insert sample users, tags and posts that are not there yet."""
            created = seed_sample_data()
            click.echo(f"Seeded {created['users']} users, {created['tags']} tags, {created['posts']} posts.")


def create_app(overrides=None, options=None):
    """Build a Flask app with Quillpress initialised.

    Args:
        overrides: config values applied before initialisation
        options: passed through to Quillpress (e.g. {'features': {...}})
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    Quillpress(app, options)
    return app


__all__ = ['Quillpress', 'create_app', 'Config', 'db']
