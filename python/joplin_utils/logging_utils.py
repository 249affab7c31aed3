import logging
import traceback
from typing import Optional


def setup_logging(level: int = logging.INFO, fmt: Optional[str] = None) -> None:
	"""Configure root logging once. Subsequent calls are no-ops.
	If fmt is not provided, a sensible default is used.
	"""
	if logging.getLogger().handlers:
		return
	format_str = fmt or '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
	logging.basicConfig(level=level, format=format_str)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	"""Return a module/logger by name, after ensuring logging is configured."""
	setup_logging()
	return logging.getLogger(name) if name else logging.getLogger(__name__)


class SecretRedactingFilter(logging.Filter):
	"""Replace a secret (the Web Clipper token) in rendered log messages.

	urllib3 logs full request lines at DEBUG, and the token travels in the
	query string of every request.
	"""

	def __init__(self, secret: str, mask: str = "****"):
		super().__init__()
		self.secret = secret
		self.mask = mask

	def filter(self, record: logging.LogRecord) -> bool:
		if self.secret:
			message = record.getMessage()
			if self.secret in message:
				record.msg = message.replace(self.secret, self.mask)
				record.args = None
		return True


def redact_secret(secret: str) -> None:
	"""Attach a SecretRedactingFilter for secret to every root handler."""
	if not secret:
		return
	for handler in logging.getLogger().handlers:
		if not any(isinstance(f, SecretRedactingFilter) and f.secret == secret for f in handler.filters):
			handler.addFilter(SecretRedactingFilter(secret))


def log_exception(logger: logging.Logger, message: str = "An error occurred", exc_info: Exception = None) -> None:
	"""Log an error message followed by the exception details.

	The traceback goes to DEBUG so routine service errors stay readable.

	Args:
		logger: Logger instance to use
		message: Custom error message to log before the traceback
		exc_info: Exception instance (if None, uses current exception context)
	"""
	logger.error(message)
	if exc_info is not None:
		logger.error(f"Exception type: {type(exc_info).__name__}")
		logger.error(f"Exception message: {str(exc_info)}")
	logger.debug("Full traceback:")
	logger.debug(traceback.format_exc())
