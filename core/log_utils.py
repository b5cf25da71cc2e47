#!/usr/bin/env python3
"""
core/log_utils.py: Logging setup for the lofpdf command-line tool.

Every module logs to a topic logger named "lofpdf.<topic>"; `--debug` turns
DEBUG on for selected topics only.
"""

import logging

LOGGER_PREFIX = "lofpdf"
LOG_TOPICS = ("main", "collect", "reserve", "render", "registry", "layout", "theme", "inspect")

# 256-color ANSI codes per level
LEVEL_COLORS = {
    logging.DEBUG: "\033[38;5;252m",
    logging.INFO: "\033[38;5;111m",
    logging.WARNING: "\033[38;5;229m",
    logging.ERROR: "\033[38;5;210m",
    logging.CRITICAL: "\033[38;5;217m",
}
BOLD = "\033[1m"
RESET = "\033[0m"


def debug_topics_for(spec):
    """Expands a comma list like "res,render" or "all" into topic names."""
    if not spec:
        return []
    wanted = [t.strip() for t in spec.split(",") if t.strip()]
    if "all" in wanted:
        return list(LOG_TOPICS)
    return [topic for topic in LOG_TOPICS if any(topic.startswith(w) for w in wanted)]


def setup_logging(level=logging.INFO, color_logs=False, debug_topics=None, log_file=None):
    """Replaces the root handlers with a console handler and an optional file."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(RichLogFormatter(use_color=color_logs))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
        except OSError as e:
            logging.getLogger(f"{LOGGER_PREFIX}.main").error(
                "Could not open log file %s: %s", log_file, e
            )
        else:
            file_handler.setFormatter(RichLogFormatter(use_color=False))
            root_logger.addHandler(file_handler)

    # pdfminer logs every parsed object at DEBUG
    logging.getLogger("pdfminer").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    for topic in debug_topics_for(debug_topics):
        logging.getLogger(f"{LOGGER_PREFIX}.{topic}").setLevel(logging.DEBUG)
    return root_logger


class ContextFilter(logging.Filter):
    """Tags every record with the document being processed."""

    def __init__(self, context_str=""):
        super().__init__()
        self.context_str = context_str

    def filter(self, record):
        record.context = self.context_str
        return True


class RichLogFormatter(logging.Formatter):
    """Formats records as "LEVEL:topic [context]: message", one prefix per line.

    Args:
        use_color (bool): Color the level and bold the topic with ANSI codes.
    """

    def __init__(self, use_color=False):
        super().__init__()
        self.use_color = use_color

    def _paint(self, text, code):
        return f"{code}{text}{RESET}" if self.use_color else text

    def format(self, record):
        _, _, topic = record.name.partition(".")
        topic = (topic or record.name)[:6]
        level = self._paint(f"{record.levelname[:5]:<5}", LEVEL_COLORS.get(record.levelno, ""))
        context = getattr(record, "context", "")
        prefix = f"{level}:" + self._paint(f"{topic:<6}", BOLD)
        if context:
            prefix += f"[{context}]"

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "\n".join(f"{prefix}: {line}" for line in message.split("\n"))
