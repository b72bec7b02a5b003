#!/usr/bin/env python3
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

'''Renders one tick: load config and state, collect a snapshot, print the frame and store the next state'''

import os, sys, json, argparse, shutil
from typing import List, Optional

import psutil

from termon import VERSION
from termon import log
from termon.config import Config, CONFIG_FILE, LOG_FILE
from termon.collect import SORT_KEYS
from termon.errors import SnapshotError
from termon.log import errlog
from termon.render import FrameInput, render, render_compact, export_json, export_csv, theme_names, preview_theme
from termon.snapshot import PlatformSnapshot, from_dict
from termon.provider import PsutilProvider

def make_parser() -> argparse.ArgumentParser:
	args = argparse.ArgumentParser(prog="termon", description="Terminal system monitor, renders one frame per run")
	args.add_argument("-t", "--theme",		action="store",	dest="theme",	help = "color theme, see --list-themes")
	args.add_argument("-W", "--width",		action="store",	type=int,		help = "frame width, defaults to the terminal width")
	args.add_argument("-H", "--height",		action="store",	type=int,		help = "frame height, defaults to the terminal height")
	args.add_argument("--snapshot",			action="store",	metavar="FILE",	help = "read a json snapshot from FILE instead of collecting with psutil, \"-\" for stdin")
	args.add_argument("--state",			action="store",	metavar="FILE",	help = "state file, overrides the config value")
	args.add_argument("--sort",				action="store",	choices=SORT_KEYS,	help = "process sorting")
	args.add_argument("--reverse",			action="store_true",			help = "reverse process sorting")
	args.add_argument("--filter",			action="store",	dest="filter",	help = "only show processes with names containing this string")
	args.add_argument("--scroll",			action="store",	type=int, default=None,	help = "process list scroll offset, defaults to the stored one")
	args.add_argument("--select",			action="store",	type=int, default=None,	help = "selected row in the visible process list, defaults to the stored one")
	args.add_argument("--pid",				action="store",	type=int,		help = "pid to show in the details overlay")
	args.add_argument("--help-overlay",		action="store_true",			help = "show the key help overlay")
	args.add_argument("--details",			action="store_true",			help = "show the process details overlay")
	args.add_argument("--compact",			action="store_true",			help = "two line output for small terminals")
	args.add_argument("--export",			action="store",	choices=["json", "csv"],	help = "print metrics as json or csv instead of a frame")
	args.add_argument("--list-themes",		action="store_true",			help = "list available themes and exit")
	args.add_argument("--preview-theme",	action="store",	metavar="NAME",	help = "show the colors of a theme and exit")
	args.add_argument("--debug",			action="store_true",			help = "set loglevel to DEBUG overriding value set in config")
	args.add_argument("-v", "--version",	action="store_true",			help = "show version info and exit")
	return args

def read_file(path: str) -> str:
	if not os.path.isfile(path): return ""
	try:
		with open(path, "r") as f:
			return f.read()
	except OSError as e:
		errlog.warning(f'Could not read "{path}": {e}')
		return ""

def write_file(path: str, data: str):
	try:
		with open(path, "w") as f:
			f.write(data)
	except OSError as e:
		errlog.exception(f'Could not write "{path}": {e}')

def load_snapshot(path: Optional[str], provider: PsutilProvider) -> PlatformSnapshot:
	if not path: return provider.collect()
	raw: str = sys.stdin.read() if path == "-" else read_file(path)
	try:
		data = json.loads(raw)
	except ValueError as e:
		raise SnapshotError(f'Snapshot "{path}" is not valid json: {e}') from e
	return from_dict(data)

def stored_int(state_blob: str, key: str) -> int:
	try:
		value = json.loads(state_blob).get(key, 0) if state_blob else 0
	except (ValueError, AttributeError):
		return 0
	return value if isinstance(value, int) else 0

def main(argv: Optional[List[str]] = None) -> int:
	stdargs = make_parser().parse_args(argv)

	if stdargs.version:
		print(f'termon version: {VERSION}\n'
			f'psutil version: {".".join(str(x) for x in psutil.version_info)}')
		return 0
	if stdargs.list_themes:
		print("\n".join(theme_names()))
		return 0
	if stdargs.preview_theme:
		print(preview_theme(stdargs.preview_theme))
		return 0

	config = Config(CONFIG_FILE)
	try:
		log.setup(LOG_FILE, config.log_level, stdargs.debug)
	except PermissionError:
		print(f'ERROR!\nNo permission to write to "{os.path.dirname(LOG_FILE)}" directory!')
	errlog.info(f'New instance of termon version {VERSION} started with pid {os.getpid()}')
	config.log_messages()

	term_size = shutil.get_terminal_size()
	state_file: str = stdargs.state or config.state_file
	previous_state: str = read_file(state_file)

	try:
		snapshot = load_snapshot(stdargs.snapshot, PsutilProvider(config.check_temp, config.show_battery))
	except SnapshotError as e:
		errlog.error(str(e))
		print(f'ERROR!\n{e}', file=sys.stderr)
		return 1

	frame = FrameInput(
		viewport_width=stdargs.width or term_size.columns,
		viewport_height=stdargs.height or term_size.lines,
		theme=stdargs.theme or config.color_theme,
		previous_state=previous_state,
		snapshot=snapshot,
		process_filter=config.proc_filter if stdargs.filter is None else stdargs.filter,
		sort_key=stdargs.sort or config.proc_sorting,
		sort_reversed=stdargs.reverse or config.proc_reversed,
		show_help=stdargs.help_overlay,
		show_process_details=stdargs.details,
		selected_pid=stdargs.pid,
		process_scroll_offset=stored_int(previous_state, "processScrollOffset") if stdargs.scroll is None else stdargs.scroll,
		process_selection_index=stored_int(previous_state, "processSelectedIndex") if stdargs.select is None else stdargs.select,
		preferred_net_interface=config.net_iface or "auto",
		disk_filter=config.disks_filter,
		interval=config.update_ms / 1000,
		border_style=config.border_style)

	if stdargs.export == "json":
		print(export_json(frame))
	elif stdargs.export == "csv":
		print(export_csv(frame))
	elif stdargs.compact:
		print(render_compact(frame))
	else:
		text, state_blob = render(frame)
		write_file(state_file, state_blob)
		print(text)

	config.save_config()
	return 0

if __name__ == "__main__":
	raise SystemExit(main())
