import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(app_env)s] %(name)s: %(message)s"

# Third-party loggers held at WARNING
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine", "redis")


class AppEnvFilter(logging.Filter):
    """Stamps each record with the deployment environment."""

    def __init__(self, app_env: str) -> None:
        super().__init__()
        self.app_env = app_env

    def filter(self, record: logging.LogRecord) -> bool:
        record.app_env = self.app_env
        return True


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: int | str | None = None, app_env: str | None = None) -> None:
    """Send HireMe logs to stdout; level and env default to LOG_LEVEL and APP_ENV."""
    if level is None or app_env is None:
        from hireme.config import settings

        level = settings.log_level if level is None else level
        app_env = settings.app_env if app_env is None else app_env

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(AppEnvFilter(app_env or "development"))

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    root.handlers.clear()
    root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
