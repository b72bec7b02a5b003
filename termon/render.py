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

'''One tick: previous state blob and snapshot in, frame text and next state blob out.

render() is pure apart from logging. The host owns the terminal, the refresh loop,
input decoding and where the state blob is kept between ticks.
'''

import json
from time import time
from typing import List, Dict, Tuple, Optional, Any, Sequence, NamedTuple

from termon.collect import CpuCollector, MemCollector, NetCollector, DiskCollector, ProcCollector, TempCollector, BatteryCollector, ProcStat
from termon.errors import StateError
from termon.fmt import Number, min_max, decimal
from termon.log import errlog, TimeIt
from termon.boxes import BoxStyle, split_horizontal, get_style
from termon.snapshot import PlatformSnapshot
from termon.theme import Theme, get_theme, DEFAULT_THEME
from termon import theme as themes
from termon.widgets import CpuBox, MemBox, NetBox, DiskBox, ProcBox, InfoBar, Header, HelpOverlay, DetailOverlay, Compact

class FrameInput(NamedTuple):
	viewport_width: int = 80
	viewport_height: int = 24
	theme: str = "default"
	previous_state: str = ""
	snapshot: PlatformSnapshot = PlatformSnapshot()
	process_filter: str = ""
	sort_key: str = "cpu"
	sort_reversed: bool = False
	show_help: bool = False
	show_process_details: bool = False
	selected_pid: Optional[int] = None
	process_scroll_offset: int = 0
	process_selection_index: int = 0
	preferred_net_interface: str = "auto"
	disk_filter: str = ""
	interval: Number = 2.0
	border_style: str = "rounded"

class Layout:
	header_height: int = 1
	top_height: int = 8
	mid_height: int = 5
	info_height: int = 1
	min_proc_height: int = 4
	left_pct: int = 60

	@classmethod
	def proc_height(cls, height: int) -> int:
		return max(height - cls.top_height - cls.mid_height - 2, cls.min_proc_height)

	@classmethod
	def list_start(cls) -> int:
		'''Terminal row (1 based) of the first process row, for the host to map mouse clicks'''
		return cls.header_height + 1 + cls.top_height + cls.mid_height + 3

	@classmethod
	def left_width(cls, width: int) -> int:
		return width * cls.left_pct // 100

#? State ---------------------------------------------------------------------------------------->

class State:
	'''Persisted state between ticks, a flat json object'''
	keys: List[str] = ["cpuRaw", "cpuHistory", "memHistory", "netData", "netHistory", "diskStats", "processes",
		"tempHistory", "batteryHistory", "processMaxRows", "processListStart", "processMaxScroll",
		"processScrollOffset", "processSelectedIndex", "processSelectedPid"]

	@staticmethod
	def decode(blob: Optional[str]) -> Dict[str, Any]:
		try:
			data = json.loads(blob) #type: ignore
		except (TypeError, ValueError) as e:
			raise StateError(f'Could not decode state: {e}') from e
		if not isinstance(data, dict):
			raise StateError(f'State should be an object, got {type(data).__name__}')
		return data

	@classmethod
	def load(cls, blob: Optional[str]) -> Dict[str, Any]:
		'''Missing or empty blob is a quiet cold start, a corrupt one is a cold start with a warning'''
		if not blob or not blob.strip(): return {}
		try:
			return cls.decode(blob)
		except StateError as e:
			errlog.warning(f'{e}, starting without previous state')
			return {}

	@staticmethod
	def dump(state: Dict[str, Any]) -> str:
		return json.dumps(state)

#? Process selection ---------------------------------------------------------------------------->

class Selection(NamedTuple):
	scroll: int = 0
	index: int = 0
	pid: Optional[int] = None
	max_scroll: int = 0
	visible: int = 0

	@classmethod
	def compute(cls, processes: Sequence[ProcStat], rows: int, scroll: int = 0, index: int = 0) -> "Selection":
		'''Clamp requested scroll and selection against the current list and viewport'''
		count: int = len(processes)
		max_scroll: int = max(0, count - rows)
		scroll = min_max(scroll, 0, max_scroll)
		visible: int = max(min(rows, count - scroll), 0)
		index = min_max(index, 0, max(visible - 1, 0))
		pid: Optional[int] = processes[scroll + index].pid if visible > 0 else None
		return cls(scroll=scroll, index=index, pid=pid, max_scroll=max_scroll, visible=visible)

def detail_target(processes: Sequence[ProcStat], selected_pid: Optional[int], selection: Selection) -> Optional[ProcStat]:
	'''Process for the detail overlay, the requested pid if still listed, else the selected row'''
	if selected_pid is not None:
		for p in processes:
			if p.pid == selected_pid: return p
	if selection.pid is None: return None
	return processes[selection.scroll + selection.index]

#? Frame ---------------------------------------------------------------------------------------->

def render(frame: FrameInput) -> Tuple[str, str]:
	'''Returns (frame_text, state_blob)'''
	TimeIt.start("render")
	prev: Dict[str, Any] = State.load(frame.previous_state)
	theme: Theme = get_theme(frame.theme)
	width: int = max(frame.viewport_width, 0)
	height: int = max(frame.viewport_height, 0)
	snap = frame.snapshot
	style: BoxStyle = get_style(frame.border_style)

	cpu = CpuCollector.collect(snap, prev)
	mem = MemCollector.collect(snap, prev)
	net = NetCollector.collect(snap, prev, frame.interval, frame.preferred_net_interface)
	disk = DiskCollector.collect(snap, prev, frame.interval, frame.disk_filter)
	procs = ProcCollector.collect(snap, prev, frame.interval, frame.sort_key, frame.sort_reversed, frame.process_filter)
	temp = TempCollector.collect(snap, prev)
	battery = BatteryCollector.collect(snap, prev)

	left_width: int = Layout.left_width(width)
	right_width: int = width - left_width
	proc_height: int = Layout.proc_height(height)
	rows: int = ProcBox.viewport_rows(proc_height)
	selection = Selection.compute(procs.processes, rows, frame.process_scroll_offset, frame.process_selection_index)

	lines: List[str] = [Header.draw(width, theme, snap.uptime.seconds if snap.uptime is not None else None)]
	lines += split_horizontal(
		CpuBox.draw(cpu, left_width, theme, Layout.top_height, style),
		MemBox.draw(mem, right_width, theme, Layout.top_height, style),
		left_width, right_width)
	lines += split_horizontal(
		NetBox.draw(net, left_width, theme, Layout.mid_height, style),
		DiskBox.draw(disk, right_width, theme, Layout.mid_height, style),
		left_width, right_width)
	lines += ProcBox.draw(procs, width, proc_height, theme, selection.scroll, selection.index, frame.process_filter, style)
	lines.append(InfoBar.draw(temp, battery, theme, snap.load_avg))

	if frame.show_help:
		lines = HelpOverlay.draw(width, height, theme)
	elif frame.show_process_details:
		target = detail_target(procs.processes, frame.selected_pid, selection)
		if target is not None:
			lines = DetailOverlay.draw(target, width, height, theme)

	state: Dict[str, Any] = {}
	for fragment in (cpu.state_data, mem.state_data, net.state_data, disk.state_data, procs.state_data, temp.state_data, battery.state_data):
		state.update(fragment)
	state.update({
		"processMaxRows" : rows,
		"processListStart" : Layout.list_start(),
		"processMaxScroll" : selection.max_scroll,
		"processScrollOffset" : selection.scroll,
		"processSelectedIndex" : selection.index,
		"processSelectedPid" : selection.pid,
	})
	TimeIt.stop("render")
	return "\n".join(lines), State.dump(state)

def render_compact(frame: FrameInput) -> str:
	'''Two line view for small terminals, previous state is only read'''
	prev: Dict[str, Any] = State.load(frame.previous_state)
	theme: Theme = get_theme(frame.theme)
	cpu = CpuCollector.collect(frame.snapshot, prev)
	mem = MemCollector.collect(frame.snapshot, prev)
	net = NetCollector.collect(frame.snapshot, prev, frame.interval, frame.preferred_net_interface)
	return "\n".join(Compact.draw(cpu, mem, net, frame.viewport_width, theme))

#? Export --------------------------------------------------------------------------------------->

def _summary(frame: FrameInput) -> Dict[str, Any]:
	prev: Dict[str, Any] = State.load(frame.previous_state)
	snap = frame.snapshot
	cpu = CpuCollector.collect(snap, prev)
	mem = MemCollector.collect(snap, prev)
	net = NetCollector.collect(snap, prev, frame.interval, frame.preferred_net_interface)
	disk = DiskCollector.collect(snap, prev, frame.interval, frame.disk_filter)
	procs = ProcCollector.collect(snap, prev, frame.interval, frame.sort_key, frame.sort_reversed, frame.process_filter)
	temp = TempCollector.collect(snap, prev)
	battery = BatteryCollector.collect(snap, prev)
	return {
		"cpu" : { "percent" : cpu.overall, "cores" : [c.pct for c in cpu.cores], "model" : cpu.model, "frequency" : cpu.frequency },
		"memory" : { "percent" : mem.used_percent, "used" : mem.used_str, "total" : mem.total_str, "swap" : mem.swap_summary, "pressure" : mem.pressure },
		"network" : { "interface" : net.primary.name, "rx" : net.primary.rx_rate_str, "tx" : net.primary.tx_rate_str },
		"disk" : { "read" : disk.read_rate_str, "write" : disk.write_rate_str,
			"mounts" : [{ "mountPoint" : m.mount_point, "percent" : m.used_percent, "level" : m.level } for m in disk.mounts] },
		"processes" : { "count" : procs.count, "running" : procs.running, "sleeping" : procs.sleeping },
		"temperature" : { "cpu" : temp.formatted, "status" : temp.status },
		"battery" : { "present" : battery.present, "summary" : battery.summary },
	}

def export_json(frame: FrameInput) -> str:
	return json.dumps(_summary(frame), indent=2)

CSV_HEADER: str = "timestamp,cpu_percent,mem_percent,process_count"

def export_csv(frame: FrameInput, timestamp: Optional[int] = None, header: bool = True) -> str:
	'''One csv row of the headline numbers, with the header line unless header=False'''
	summary = _summary(frame)
	row: str = ",".join([str(int(time()) if timestamp is None else timestamp), decimal(summary["cpu"]["percent"]),
		decimal(summary["memory"]["percent"]), str(summary["processes"]["count"])])
	return f'{CSV_HEADER}\n{row}' if header else row

#? Themes --------------------------------------------------------------------------------------->

def theme_names() -> List[str]:
	return themes.theme_names()

def preview_theme(name: str) -> str:
	'''Every color role of a theme as a labeled swatch line'''
	theme: Theme = get_theme(name)
	lines: List[str] = [f'{theme.title(theme.name)}']
	for role in DEFAULT_THEME:
		if role == "name": continue
		color = theme[role]
		lines.append(f'{role:<12} {color("█" * 6)} {color.hexa}')
	return "\n".join(lines)
