import os
import logging
from logging.handlers import TimedRotatingFileHandler
import gzip
import glob
import time
import re
from datetime import datetime
from collections import defaultdict
import click
from flask import request
from flask.cli import with_appcontext
from flask.logging import default_handler

LOG_FORMAT = "%(asctime)s [%(levelname)s] in %(module)s: %(message)s"
LOG_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2}).*\[(INFO|ERROR|WARNING)\]")


# ==================================================
# LOGGING SETUP
# ==================================================
def setup_logging(app):
    """Configure the app, access and orders loggers."""
    log_dir = app.config["LOG_DIR"]
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    access_formatter = logging.Formatter("%(asctime)s - %(message)s")

    app_logger = app.logger
    access_logger = logging.getLogger("access")
    orders_logger = logging.getLogger("orders")
    # Module loggers (Controllers.*, Utils.*) share the app's file handlers
    root_logger = logging.getLogger()

    # Re-running setup (tests, reloader) replaces our handlers instead of stacking them
    for logger in (app_logger, access_logger, orders_logger, root_logger):
        _remove_own_handlers(logger)
        logger.setLevel(logging.INFO)

    app_handler = _rotating(log_dir, "app.log", 14, formatter, logging.INFO)
    error_handler = _rotating(log_dir, "error.log", 30, formatter, logging.ERROR)
    root_logger.addHandler(app_handler)
    root_logger.addHandler(error_handler)
    root_logger.addHandler(_console(formatter))
    # app.logger propagates to the root handlers above
    app_logger.removeHandler(default_handler)
    app_logger.propagate = True

    access_logger.addHandler(_rotating(log_dir, "access.log", 7, access_formatter, logging.INFO))
    access_logger.addHandler(_console(access_formatter))
    access_logger.propagate = False

    # Dedicated orders logger: purchases, gifts, status changes
    orders_logger.addHandler(_rotating(log_dir, "orders.log", 30, formatter, logging.INFO))
    orders_logger.propagate = True

    register_access_log_hook(app, access_logger)
    cleanup_old_logs(app, log_dir)
    register_log_summary_command(app)

    app_logger.info("🚀 Logging initialized successfully.")
    return app_logger


def _rotating(log_dir, filename, backup_count, formatter, level):
    handler = TimedRotatingFileHandler(
        os.path.join(log_dir, filename), when="midnight", interval=1, backupCount=backup_count,
        encoding="utf-8", delay=True
    )
    handler.suffix = "%Y-%m-%d"
    handler.setFormatter(formatter)
    handler.setLevel(level)
    handler._tbucks_handler = True
    return handler


def _console(formatter):
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)
    handler._tbucks_handler = True
    return handler


def _remove_own_handlers(logger):
    for handler in list(logger.handlers):
        if getattr(handler, "_tbucks_handler", False):
            logger.removeHandler(handler)
            handler.close()


# ==================================================
# ACCESS LOGGING
# ==================================================
def register_access_log_hook(app, access_logger):
    """Logs each incoming request (IP, method, URL) into access.log."""

    @app.before_request
    def log_request_info():
        access_logger.info(f"{request.remote_addr} {request.method} {request.url}")


# ==================================================
# OLD LOG CLEANUP & COMPRESSION
# ==================================================
def cleanup_old_logs(app, folder, days=7):
    """Compress rotated logs and delete archives older than ``days``."""
    now = time.time()
    for log_file in glob.glob(os.path.join(folder, "*.log.*")):
        if log_file.endswith(".gz"):
            continue
        try:
            with open(log_file, "rb") as f_in:
                with gzip.open(f"{log_file}.gz", "wb") as f_out:
                    f_out.writelines(f_in)
            os.remove(log_file)
            app.logger.info(f"🗜️ Compressed log: {log_file}")
        except OSError as e:
            app.logger.error(f"❌ Failed to compress {log_file}: {e}")

    for gz_file in glob.glob(os.path.join(folder, "*.gz")):
        if os.stat(gz_file).st_mtime < now - days * 86400:
            os.remove(gz_file)
            app.logger.info(f"🧹 Deleted old log: {gz_file}")


# ==================================================
# LOG SUMMARY
# ==================================================
def summarize_logs(log_dir, days=7):
    """Count INFO/WARNING/ERROR lines per day across app and error logs."""
    summary = defaultdict(lambda: {"INFO": 0, "ERROR": 0, "WARNING": 0})
    now = datetime.now()

    for filename in os.listdir(log_dir):
        if not filename.startswith(("app.log", "error.log")):
            continue

        path = os.path.join(log_dir, filename)
        mtime = datetime.fromtimestamp(os.path.getmtime(path))
        if (now - mtime).days > days:
            continue

        opener = gzip.open if filename.endswith(".gz") else open
        with opener(path, "rt", encoding="utf-8", errors="ignore") as f:
            for line in f:
                match = LOG_PATTERN.match(line)
                if match:
                    date_str, level = match.groups()
                    summary[date_str][level] += 1

    return dict(sorted(summary.items()))


def register_log_summary_command(app):
    """Adds 'flask logs:summary' CLI command to view log stats."""
    if "logs:summary" in app.cli.commands:
        return

    @click.command("logs:summary")
    @with_appcontext
    @click.option("--days", default=7, help="Days of logs to summarize")
    def logs_summary(days):
        summary = summarize_logs(app.config["LOG_DIR"], days=days)
        if not summary:
            click.echo("No log entries found in the specified time range.")
            return

        click.echo("\n📊 Log Summary\n──────────────────────────────")
        totals = {"INFO": 0, "ERROR": 0, "WARNING": 0}
        for date_str, counts in summary.items():
            for level, value in counts.items():
                totals[level] += value
            click.echo(
                f"{date_str}  INFO: {counts['INFO']:<5}  WARNING: {counts['WARNING']:<5}  ERROR: {counts['ERROR']:<5}"
            )

        click.echo("──────────────────────────────")
        click.echo(
            f"Total INFO: {totals['INFO']}   WARNING: {totals['WARNING']}   ERROR: {totals['ERROR']}"
        )

    app.cli.add_command(logs_summary)
