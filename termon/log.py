# indent = tab
# tab-size = 4

# Copyright 2020 Aristocratos (jakob@qvantnet.com)

#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at

#        http://www.apache.org/licenses/LICENSE-2.0

#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

import os, logging, logging.handlers
from time import time
from typing import Dict, Optional

#? Setup error logger ---------------------------------------------------------------->

errlog = logging.getLogger("ErrorLogger")
errlog.addHandler(logging.NullHandler())

LOG_LEVELS = ["ERROR", "WARNING", "INFO", "DEBUG"]

_handler: Optional[logging.Handler] = None

def setup(path: str, level: str = "WARNING", debug: bool = False) -> logging.Logger:
	'''Attach a rotating file handler writing to <path>, replaces any handler from an earlier call'''
	global _handler
	if _handler is not None:
		errlog.removeHandler(_handler)
		_handler.close()
		_handler = None
	dir_name = os.path.dirname(path)
	if dir_name and not os.path.isdir(dir_name):
		os.makedirs(dir_name, exist_ok=True)
	eh = logging.handlers.RotatingFileHandler(path, maxBytes=1048576, backupCount=4)
	eh.setLevel(logging.DEBUG)
	eh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s: %(message)s", datefmt="%d/%m/%y (%X)"))
	errlog.addHandler(eh)
	_handler = eh
	set_level("DEBUG" if debug else level)
	return errlog

def set_level(level: str):
	if level not in LOG_LEVELS:
		errlog.warning(f'Unknown log level "{level}", using WARNING')
		level = "WARNING"
	errlog.setLevel(getattr(logging, level))

#? Timers for testing and debugging -------------------------------------------------------------->

class TimeIt:
	timers: Dict[str, float] = {}

	@classmethod
	def start(cls, name):
		cls.timers[name] = time()

	@classmethod
	def stop(cls, name):
		if name in cls.timers:
			total: float = time() - cls.timers[name]
			del cls.timers[name]
			errlog.debug(f'{name} completed in {total:.6f} seconds')
