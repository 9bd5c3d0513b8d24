import logging
import os
from logging.handlers import RotatingFileHandler
from placecache.core.config import settings

class LoggerConfig:
    """
    Rotating file + console logging for the place cache.
    Lines about a single place carry a [place_id] tag so one place can be grepped end to end.
    """
    def __init__(
        self,
        env=20,
        logger_name="PlaceCache",
        log_directory="logs",
        log_file="placecache.log",
        max_bytes=1024 * 1024 * 10,
        backup_count=5
    ):
        try:
            self.logger_name = logger_name
            self.log_directory = os.path.abspath(log_directory)
            self.log_file_path = os.path.join(self.log_directory, log_file)
            self.env = env
            self.max_bytes = max_bytes
            self.backup_count = backup_count
            self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

            self.logger = logging.getLogger(self.logger_name)
            self.setup_logger()
        except Exception as e:
            print(f"Failed to initialize logger: {str(e)}")

    def setup_logger(self):
        try:
            os.makedirs(self.log_directory, exist_ok=True)
            formatter = logging.Formatter(self.log_format)

            # Only this logger's own handlers count, not the root's
            if not self.logger.handlers:
                file_handler = RotatingFileHandler(
                    self.log_file_path,
                    maxBytes=self.max_bytes,
                    backupCount=self.backup_count,
                    encoding="utf-8"
                )
                console_handler = logging.StreamHandler()
                for handler in (file_handler, console_handler):
                    handler.setLevel(self.env)
                    handler.setFormatter(formatter)
                    self.logger.addHandler(handler)

            self.logger.setLevel(self.env)

        except Exception as e:
            print(f"Failed to setup logger handlers: {str(e)}")

    def log(self, level: int, message: str, extra: dict = None, place_id: str = None):
        """Log message, tagged with place_id when given"""
        if place_id:
            message = f"[{place_id}] {message}"
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)

# Initialize Logger
logs = LoggerConfig(
    env=settings.LOGGER,
    logger_name="PLACE-CACHE",
    log_directory=settings.LOG_DIRECTORY,
    log_file="placecache.log",
    max_bytes=settings.LOG_MAX_BYTES,
    backup_count=settings.LOG_BACKUP_COUNT
)
