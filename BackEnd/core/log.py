import logging
from typing import Optional

from BackEnd.core.paths import log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logger(
	name: Optional[str] = None,
	log_file: str = "studyflow.log",
	level: int = logging.INFO,
	console: bool = True,
	handler_level: Optional[int] = None,
) -> logging.Logger:
	"""Configure and return a logger (the root logger by default).

	Handlers are attached once; calling this again returns the same logger.
	"""
	logger = logging.getLogger(name)
	logger.setLevel(level)

	if not logger.handlers:
		formatter = logging.Formatter(LOG_FORMAT)
		file_handler = logging.FileHandler(log_dir() / log_file, encoding="utf-8")
		file_handler.setLevel(handler_level or level)
		file_handler.setFormatter(formatter)
		logger.addHandler(file_handler)

		if console:
			console_handler = logging.StreamHandler()
			console_handler.setLevel(handler_level or level)
			console_handler.setFormatter(formatter)
			logger.addHandler(console_handler)

	return logger
