"""
Font Library server entry point.

The ``font-library`` console script embeds Gunicorn to serve the Flask
application from font_library.app:

    Docker -> poetry run font-library -> server.main() -> Gunicorn -> Flask app

Functions:
    configure_logging(debug): Root logger with rotating file + stdout handlers
    main(): Entry point for the console script
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

logger = logging.getLogger(__name__)

LOG_FILE = "font_library.log"
DEBUG_ENV_VAR = "FONT_LIBRARY_DEBUG"


def is_debug_enabled(argv=None) -> bool:
    """Debug mode is on with --debug or FONT_LIBRARY_DEBUG=true/1/yes."""
    argv = sys.argv[1:] if argv is None else argv
    if "--debug" in argv:
        return True
    return os.environ.get(DEBUG_ENV_VAR, "").lower() in ("true", "1", "yes")


def configure_logging(debug: bool = False, log_file: str = LOG_FILE) -> None:
    """Configure global logging with a 10MB rotating file and stdout."""
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates (e.g., from gunicorn)
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    log_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=3
    )
    log_handler.setLevel(log_level)
    log_handler.setFormatter(formatter)
    root_logger.addHandler(log_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def main(debug: bool = False) -> None:
    """Main entry point for the font-library console command.

    Args:
        debug: Enable debug logging and disable the worker timeout so
               breakpoints can be used. Also set by --debug or the
               FONT_LIBRARY_DEBUG environment variable.
    """
    from gunicorn.app.base import BaseApplication
    from config import load_config
    from font_library.app import create_app

    debug = debug or is_debug_enabled()
    configure_logging(debug)

    if debug:
        logger.info("Debug mode enabled: verbose logging and worker timeout disabled")

    logger.info("Loading configuration from config.yml")
    config = load_config()

    app = create_app(config)

    config_path = os.path.join(os.path.dirname(__file__), "gunicorn_config.py")

    class StandaloneApplication(BaseApplication):
        """Custom Gunicorn application for embedding within the entry point."""

        def __init__(self, app, options=None):
            self.options = options or {}
            self.application = app
            super().__init__()

        def load_config(self):
            config_file = self.options.get("config")
            if config_file:
                self.cfg.set("config", config_file)
                with open(config_file, "r") as f:
                    config_code = f.read()
                config_namespace = {}
                exec(config_code, config_namespace)
                for key, value in config_namespace.items():
                    if key in self.cfg.settings and value is not None:
                        self.cfg.set(key.lower(), value)

            bind = self.options.get("bind")
            if bind:
                self.cfg.set("bind", bind)
            if self.options.get("debug"):
                self.cfg.set("timeout", 0)
                self.cfg.set("loglevel", "debug")

        def load(self):
            return self.application

    server_config = config.get("server", {}) or {}
    options = {
        "config": config_path,
        "debug": debug,
        "bind": server_config.get("bind"),
    }
    StandaloneApplication(app, options).run()


if __name__ == "__main__":
    main()
