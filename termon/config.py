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

import os
from string import Template
from typing import List, Dict, Union, Optional, Mapping

from termon import VERSION
from termon.boxes import STYLES
from termon.collect import SORT_KEYS
from termon.errors import ConfigError
from termon.log import errlog, LOG_LEVELS
from termon.theme import THEMES

CONFIG_DIR: str = f'{os.path.expanduser("~")}/.config/termon'
CONFIG_FILE: str = f'{CONFIG_DIR}/termon.conf'
LOG_FILE: str = f'{CONFIG_DIR}/error.log'

DEFAULT_CONF: Template = Template(f'#? Config file for termon v. {VERSION}' + '''

#* Color theme, one of "default" "nord" "monokai" "gruvbox" "solarized" "onedark" "tokyonight" "catppuccin" "matrix".
color_theme="$color_theme"

#* Update time in milliseconds, used as the interval for rate calculations, minimum 100.
update_ms=$update_ms

#* Processes sorting, "cpu" "mem" "pid" "name".
proc_sorting="$proc_sorting"

#* Reverse sorting order, True or False.
proc_reversed=$proc_reversed

#* Only show processes with names containing this string, case insensitive.
proc_filter="$proc_filter"

#* Network interface to show in the network box, "auto" picks the first interface with traffic.
net_iface="$net_iface"

#* Mount points to show, comma separated, i.e. disks_filter="/,/home".
#* Begin line with "exclude=" to hide the listed mount points instead, i.e. disks_filter="exclude=/boot,/tmp".
disks_filter="$disks_filter"

#* Box border style, "single" "double" "rounded" "heavy".
border_style="$border_style"

#* Show battery stats in the info bar if a battery is present.
show_battery=$show_battery

#* Show cpu temperature in the info bar.
check_temp=$check_temp

#* File holding state between runs, needed for rates and graphs.
state_file="$state_file"

#* Set loglevel for "~/.config/termon/error.log" levels are: "ERROR" "WARNING" "INFO" "DEBUG".
#* The level set includes all lower levels, i.e. "DEBUG" will show all logging info.
log_level=$log_level
''')

def _strtobool(value: str) -> bool:
	value = value.strip().lower()
	if value in ("y", "yes", "t", "true", "on", "1"): return True
	if value in ("n", "no", "f", "false", "off", "0"): return False
	raise ValueError(f'invalid truth value {value!r}')

class Config:
	'''Holds all config variables and functions for loading from and saving to disk'''
	keys: List[str] = ["color_theme", "update_ms", "proc_sorting", "proc_reversed", "proc_filter", "net_iface", "disks_filter",
						"border_style", "show_battery", "check_temp", "state_file", "log_level"]
	conf_dict: Dict[str, Union[str, int, bool]]
	color_theme: str = "default"
	update_ms: int = 2000
	proc_sorting: str = "cpu"
	proc_reversed: bool = False
	proc_filter: str = ""
	net_iface: str = "auto"
	disks_filter: str = ""
	border_style: str = "rounded"
	show_battery: bool = True
	check_temp: bool = True
	state_file: str = "/tmp/termon-state.json"
	log_level: str = "WARNING"

	warnings: List[str]
	info: List[str]

	sorting_options: List[str] = SORT_KEYS
	log_levels: List[str] = LOG_LEVELS

	changed: bool = False
	recreate: bool = False
	config_file: str = ""

	_initialized: bool = False

	def __init__(self, path: str = CONFIG_FILE, environ: Optional[Mapping[str, str]] = None):
		object.__setattr__(self, "conf_dict", {})
		object.__setattr__(self, "warnings", [])
		object.__setattr__(self, "info", [])
		self.config_file = path
		conf: Dict[str, Union[str, int, bool]] = self.load_config()
		if not "version" in conf.keys():
			self.recreate = True
			self.info.append(f'Config file malformatted or missing, will be recreated on exit!')
		elif conf["version"] != VERSION:
			self.recreate = True
			self.info.append(f'Config file version and termon version missmatch, will be recreated on exit!')
		for key in self.keys:
			if key in conf.keys() and conf[key] != "_error_":
				setattr(self, key, conf[key])
			else:
				self.recreate = True
				self.conf_dict[key] = getattr(self, key)
		self.apply_env(os.environ if environ is None else environ)
		self._initialized = True

	def __setattr__(self, name, value):
		if self._initialized:
			object.__setattr__(self, "changed", True)
		object.__setattr__(self, name, value)
		if name not in ["_initialized", "recreate", "changed", "config_file"]:
			self.conf_dict[name] = value

	def apply_env(self, environ: Mapping[str, str]):
		'''TERMON_THEME and TERMON_REFRESH (seconds) override the file for this run only, they are never saved'''
		if environ.get("TERMON_THEME"):
			object.__setattr__(self, "color_theme", environ["TERMON_THEME"])
		if environ.get("TERMON_REFRESH"):
			try:
				object.__setattr__(self, "update_ms", max(int(float(environ["TERMON_REFRESH"]) * 1000), 100))
			except ValueError:
				self.warnings.append(f'Environment variable "TERMON_REFRESH" should be a number of seconds!')

	def _coerce(self, key: str, value: str) -> Union[str, int, bool]:
		default = getattr(type(self), key)
		if type(default) == bool:
			try:
				return _strtobool(value)
			except ValueError:
				raise ConfigError(f'Config key "{key}" can only be True or False!')
		if type(default) == int:
			try:
				return int(value)
			except ValueError:
				raise ConfigError(f'Config key "{key}" should be an integer!')
		return str(value)

	def load_config(self) -> Dict[str, Union[str, int, bool]]:
		'''Load config from file, set correct types for values and return a dict'''
		new_config: Dict[str, Union[str, int, bool]] = {}
		if not os.path.isfile(self.config_file): return new_config
		try:
			with open(self.config_file, "r") as f:
				for line in f:
					line = line.strip()
					if line.startswith("#? Config"):
						new_config["version"] = line[line.find("v. ") + 3:]
						continue
					if not '=' in line:
						continue
					key, line = line.split('=', maxsplit=1)
					if not key in self.keys:
						continue
					try:
						new_config[key] = self._coerce(key, line.strip('"'))
					except ConfigError as e:
						self.warnings.append(str(e))
		except Exception as e:
			errlog.exception(str(e))
		if "proc_sorting" in new_config and not new_config["proc_sorting"] in self.sorting_options:
			new_config["proc_sorting"] = "_error_"
			self.warnings.append(f'Config key "proc_sorting" didn\'t get an acceptable value!')
		if "log_level" in new_config and not new_config["log_level"] in self.log_levels:
			new_config["log_level"] = "_error_"
			self.warnings.append(f'Config key "log_level" didn\'t get an acceptable value!')
		if "color_theme" in new_config and not str(new_config["color_theme"]).lower() in THEMES:
			new_config["color_theme"] = "_error_"
			self.warnings.append(f'Config key "color_theme" is not a known theme!')
		if "border_style" in new_config and not new_config["border_style"] in STYLES:
			new_config["border_style"] = "_error_"
			self.warnings.append(f'Config key "border_style" didn\'t get an acceptable value!')
		if "update_ms" in new_config and int(new_config["update_ms"]) < 100:
			new_config["update_ms"] = 100
			self.warnings.append(f'Config key "update_ms" can\'t be lower than 100!')
		return new_config

	def save_config(self):
		'''Save current config to config file if difference in values or version, creates a new file if not found'''
		if not self.changed and not self.recreate: return
		try:
			dir_name = os.path.dirname(self.config_file)
			if dir_name and not os.path.isdir(dir_name):
				os.makedirs(dir_name, exist_ok=True)
			with open(self.config_file, "w" if os.path.isfile(self.config_file) else "x") as f:
				f.write(DEFAULT_CONF.substitute(self.conf_dict))
		except Exception as e:
			errlog.exception(str(e))

	def log_messages(self):
		'''Flush collected info and warnings to the error log'''
		for info in self.info:
			errlog.info(info)
		for warning in self.warnings:
			errlog.warning(warning)
		self.info.clear()
		self.warnings.clear()
