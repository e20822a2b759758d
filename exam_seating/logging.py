import logging
import logging.handlers

from exam_seating.config import PROJECT_DIR


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(*, environment: str, log_dir=None) -> None:
    """Console logging, plus a rotating ``app.log`` when running in production.

    Does nothing if the root logger already has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    production = (environment or "").strip().lower() == "production"
    handlers = [logging.StreamHandler()]

    if production:
        log_dir = log_dir or PROJECT_DIR / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_dir / "app.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
        )

    logging.basicConfig(level=logging.INFO if production else logging.DEBUG, format=LOG_FORMAT, handlers=handlers)
    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
