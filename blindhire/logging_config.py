"""
Logging setup for the Blind Hire backend.
Console output always, rotating file output when LOG_FILE is configured.
"""
import logging
import logging.handlers

from flask import request

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    package_logger = logging.getLogger('blindhire')
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    access_logger = logging.getLogger('blindhire.access')

    @app.after_request
    def log_request(response):
        access_logger.info(f"{request.method} {request.path} {response.status_code}")
        return response

    app.logger.handlers = package_logger.handlers
    app.logger.setLevel(level)
    return package_logger
