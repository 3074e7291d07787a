# app.py - SomedayMaybe task board
"""
SomedayMaybe - Application Factory
Version: 1.0.0

Identity and task storage live in an external backend-as-a-service; this app
keeps one board per browser session, renders it, and runs task reminders
while the board is signed in.
"""
import logging
from flask import Flask, redirect, url_for
from flask_session import Session
from config import Config
from datetime import datetime
from modules.board_service import init_boards
from modules.boards import dark_mode
from modules.tasks.presentation import priority_class, category_badge, format_due


def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Sessions
    Session(app)

    # Boards (one per browser session)
    init_boards(app)

    # --- Template helpers ---
    app.jinja_env.filters['priority_class'] = priority_class
    app.jinja_env.filters['category_badge'] = category_badge
    app.jinja_env.filters['format_due'] = format_due

    @app.context_processor
    def inject_globals():
        return {
            'datetime': datetime,
            'dark_mode': dark_mode(),
            'app_name': app.config.get('APP_NAME', 'SomedayMaybe'),
            'notice_poll_ms': int(app.config.get('NOTICE_POLL_SECONDS', 10) * 1000),
        }

    # --- Blueprints ---
    register_blueprints(app)

    # --- Root route ---
    @app.route('/')
    def index():
        return redirect(url_for('tasks.index'))

    return app


def register_blueprints(app):
    """Register all module blueprints"""
    from modules.auth import auth_bp
    from modules.tasks import tasks_bp
    from modules.reminders import reminders_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(reminders_bp)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
