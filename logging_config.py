import logging
import os

LOG_PATH = os.path.join("data", "logs")

def setup_logging(log_path: str = LOG_PATH) -> None:
    """Sets up the logging configuration for the runner."""

    # Create logs directory if it doesn't exist
    os.makedirs(log_path, exist_ok=True)

    # Clear all existing handlers to prevent duplication
    logging.getLogger().handlers.clear()

    # set up the root logger for console output only
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Create a console handler for user-facing output
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)  # Only show WARNING and above on the console
    console_formatter = logging.Formatter('%(message)s')
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # App log will be for unexpected errors and misc logs not caught by specific loggers
    app_logger = logging.getLogger('app')
    app_logger.setLevel(logging.INFO)
    app_logger.handlers.clear()
    app_logger.propagate = False

    app_log_handler = logging.FileHandler(os.path.join(log_path, "app.log"), encoding="utf-8")
    app_log_handler.setLevel(logging.INFO)
    app_log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    app_log_handler.setFormatter(app_log_formatter)
    app_logger.addHandler(app_log_handler)

    # Dedicated runner log: one line per processed test case, DEBUG and above
    runner_logger = logging.getLogger("runner")
    runner_logger.setLevel(logging.DEBUG)
    runner_logger.handlers.clear()  # Clear any existing handlers

    runner_log_handler = logging.FileHandler(os.path.join(log_path, "runner.log"), encoding="utf-8")
    runner_log_handler.setLevel(logging.DEBUG)
    runner_log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    runner_log_handler.setFormatter(runner_log_formatter)
    runner_logger.addHandler(runner_log_handler)
    runner_logger.propagate = False
