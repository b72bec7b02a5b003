import logging

from termon import log
from termon.log import errlog, TimeIt

def test_setup(tmp_path):
	path = tmp_path / "logs" / "error.log"
	log.setup(str(path), "WARNING")
	try:
		errlog.warning("disk on fire")
		errlog.info("not written")
		for handler in errlog.handlers:
			handler.flush()
		text = path.read_text()
		assert "WARNING: disk on fire" in text
		assert "not written" not in text
	finally:
		log.set_level("WARNING")

def test_setup_debug(tmp_path):
	log.setup(str(tmp_path / "error.log"), "ERROR", debug=True)
	try:
		assert errlog.level == logging.DEBUG
	finally:
		log.set_level("WARNING")

def test_set_level_unknown():
	log.set_level("LOUD")
	assert errlog.level == logging.WARNING

def test_TimeIt(caplog):
	log.set_level("DEBUG")
	try:
		with caplog.at_level(logging.DEBUG, logger="ErrorLogger"):
			TimeIt.start("tick")
			TimeIt.stop("tick")
			TimeIt.stop("never started")
		assert "tick completed in" in caplog.text
		assert "never started" not in caplog.text
	finally:
		log.set_level("WARNING")
