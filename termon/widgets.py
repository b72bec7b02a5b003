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

from math import floor, ceil
from typing import List, Tuple, Optional, Sequence

from termon.ansi import Fx, Color, truncate, visual_length
from termon.boxes import BoxStyle, ROUNDED, box, box_with_subsection
from termon.collect import CpuMetrics, MemMetrics, NetMetrics, DiskMetrics, ProcMetrics, TempMetrics, BatteryMetrics, ProcStat, IfaceRate, format_process, format_header
from termon.fmt import Number, pad_left, pad_right, fit, format_bytes, format_uptime, decimal
from termon.graphs import Symbol, sparkline, horizontal_bar, percentage_bar
from termon.snapshot import LoadAverage
from termon.theme import Theme, NET_COLORS, gradient_color, temp_color

def _fit_height(lines: List[str], height: Optional[int]) -> List[str]:
	'''Cut or blank pad content lines to height rows, None leaves them as they are'''
	if height is None: return lines
	height = max(height, 0)
	return lines[:height] + [""] * (height - len(lines))

class CpuBox:
	'''Usage sparkline header and two columns of per core bars'''
	title: str = "CPU"
	graph_width: int = 20

	@classmethod
	def draw(cls, metrics: CpuMetrics, width: int, theme: Theme, height: Optional[int] = None, style: BoxStyle = ROUNDED) -> List[str]:
		inner_width: int = max(width - 2, 0)
		header: str = f'{sparkline(metrics.history, cls.graph_width)} {floor(metrics.overall)}%'
		if metrics.frequency: header += f' @ {metrics.frequency}'
		col_width: int = max((inner_width - 2) // 2, 0)
		#* "Core NN " + bar + " NNN%" has to fit in one column
		bar_width: int = max(col_width - 13, 1)
		cells: List[str] = [cls._core(i, core.pct, bar_width, theme) for i, core in enumerate(metrics.cores)]
		lines: List[str] = [header]
		for row in range(ceil(len(cells) / 2)):
			left = cells[row * 2]
			right = cells[row * 2 + 1] if row * 2 + 1 < len(cells) else ""
			lines.append(f'{pad_right(left, col_width)}  {right}' if right else left)
		lines = [truncate(line, inner_width) for line in lines]
		return box(_fit_height(lines, None if height is None else height - 2), width, cls.title, style, theme.cpu, theme.border)

	@staticmethod
	def _core(index: int, pct: Number, bar_width: int, theme: Theme) -> str:
		bar = horizontal_bar(pct, bar_width, show_pct=False, fill_color=gradient_color(theme.gradient["cpu"], pct))
		return f'Core {pad_left(str(index), 2)} {bar} {pad_left(str(floor(pct)), 3)}%'

class MemBox:
	'''Memory summary with swap in a sub section'''
	title: str = "Memory"
	sub_title: str = "Swap"

	@classmethod
	def draw(cls, metrics: MemMetrics, width: int, theme: Theme, height: Optional[int] = None, style: BoxStyle = ROUNDED) -> List[str]:
		inner_width: int = max(width - 2, 0)
		main: List[str] = [
			f'Used:  {metrics.summary}',
			percentage_bar(metrics.used_percent, max(width - 4, 0), theme.gradient["memory"]),
			f'Cached: {metrics.cached_str}  Avail: {metrics.available_str}',
		]
		sub: List[str] = [f'Used:   {metrics.swap_summary}']
		main = [truncate(line, inner_width) for line in main]
		sub = [truncate(line, inner_width) for line in sub]
		if height is not None:
			main = _fit_height(main, height - 3 - len(sub))
		return box_with_subsection(main, sub, width, cls.title, cls.sub_title, style, theme.memory, theme.border)

class NetBox:
	'''Primary interface rates, a few more interfaces, totals and rx/tx sparklines'''
	title: str = "Network"
	max_extra: int = 2

	@staticmethod
	def rate_line(name: str, rx: str, tx: str) -> str:
		return f'{pad_right(truncate(name, 6), 6)} {Symbol.down} {pad_left(rx, 10)}  {Symbol.up} {pad_left(tx, 10)}'

	@classmethod
	def draw(cls, metrics: NetMetrics, width: int, theme: Theme, height: Optional[int] = None, style: BoxStyle = ROUNDED) -> List[str]:
		inner_width: int = max(width - 2, 0)
		primary: IfaceRate = metrics.primary
		lines: List[str] = [cls.rate_line(primary.name, primary.rx_rate_str, primary.tx_rate_str)]
		extra = [i for i in metrics.interfaces if i.name != primary.name][:cls.max_extra]
		lines += [cls.rate_line(i.name, i.rx_rate_str, i.tx_rate_str) for i in extra]
		if inner_width > 40:
			lines.append(cls.rate_line("Total", metrics.rx_rate_str, metrics.tx_rate_str))
		lines = [truncate(line, inner_width) for line in lines]

		graph_width: int = max((inner_width - 3) // 2, 0)
		download, upload = Color(NET_COLORS["download"]), Color(NET_COLORS["upload"])
		graph: str = (f'{download(Symbol.down)}{sparkline(metrics.rx_history, graph_width)} '
			f'{upload(Symbol.up)}{sparkline(metrics.tx_history, graph_width)}')

		if height is not None:
			lines = _fit_height(lines[:max(height - 3, 1)], max(height - 3, 1))
		return box(lines + [graph], width, cls.title, style, theme.network, theme.border)

class DiskBox:
	'''Usage bars for up to four mounts with aligned columns, plus the total io line'''
	title: str = "Disk"
	max_mounts: int = 4
	label_width: int = 10
	min_size_width: int = 15
	min_bar_width: int = 10

	@classmethod
	def draw(cls, metrics: DiskMetrics, width: int, theme: Theme, height: Optional[int] = None, style: BoxStyle = ROUNDED) -> List[str]:
		inner_width: int = max(width - 2, 0)
		mounts = metrics.mounts[:cls.max_mounts]
		if height is not None:
			mounts = mounts[:max(height - 3, 0)]
		size_width: int = max([len(m.summary) for m in mounts] + [cls.min_size_width])
		bar_width: int = max(inner_width - cls.label_width - 2 - size_width, cls.min_bar_width)
		lines: List[str] = []
		for m in mounts:
			bar = percentage_bar(m.used_percent, bar_width, theme.gradient["disk"], show_pct=False)
			lines.append(truncate(f'{pad_right(truncate(m.mount_point, cls.label_width), cls.label_width)} {bar} {pad_left(m.summary, size_width)}', inner_width))
		if height is not None:
			lines = _fit_height(lines, max(height - 3, 0))
		lines.append(truncate(f'IO  r {metrics.read_rate_str}  w {metrics.write_rate_str}', inner_width))
		return box(lines, width, cls.title, style, theme.disk, theme.border)

class ProcBox:
	'''Process table, a window of rows starting at the scroll offset with the selected row in reverse video'''
	title: str = "Processes"
	#* Borders, header and separator
	chrome_rows: int = 4

	@classmethod
	def viewport_rows(cls, height: int) -> int:
		return max(height - cls.chrome_rows, 0)

	@classmethod
	def draw(cls, metrics: ProcMetrics, width: int, height: int, theme: Theme, scroll: int = 0, selected: int = 0,
		process_filter: str = "", style: BoxStyle = ROUNDED) -> List[str]:
		inner_width: int = max(width - 2, 0)
		rows: int = cls.viewport_rows(height)
		name_width: int = max(inner_width - 30, 4)
		lines: List[str] = [
			f'{theme.header_fg}{Fx.b}{fit(format_header(), inner_width)}{Fx.reset}',
			"─" * max(width - 4, 0),
		]
		for i, proc in enumerate(metrics.processes[scroll:scroll + rows]):
			line = fit(format_process(proc, name_width), inner_width)
			lines.append(f'{Fx.reverse}{line}{Fx.reset}' if i == selected else line)
		lines += [""] * (rows - len(lines) + 2)
		title: str = truncate(cls.make_title(metrics, scroll, selected, process_filter), max(width - 6, 0))
		return box(lines, width, title, style, theme.process, theme.border)

	@classmethod
	def make_title(cls, metrics: ProcMetrics, scroll: int, selected: int, process_filter: str) -> str:
		out: str = f'{cls.title} [{metrics.sort_key}{" rev" if metrics.sort_reversed else ""}]'
		if process_filter: out += f' filter: {process_filter}'
		if metrics.count: out += f' {scroll + selected + 1}/{metrics.count}'
		return out

class InfoBar:
	separator: str = "  │  "

	@classmethod
	def draw(cls, temp: TempMetrics, battery: BatteryMetrics, theme: Theme, load_avg: Optional[LoadAverage] = None) -> str:
		parts: List[str] = [temp_color(theme, temp.cpu_temp)(f'CPU: {temp.formatted}')]
		parts.append(battery.summary if battery.present else "")
		if load_avg is not None and any(load_avg):
			parts.append(f'Load: {load_avg.load1:.2f} {load_avg.load5:.2f} {load_avg.load15:.2f}')
		return cls.separator.join(p for p in parts if p)

class Header:
	name: str = "termon"

	@classmethod
	def draw(cls, width: int, theme: Theme, uptime: Optional[Number] = None) -> str:
		up: str = f'up {format_uptime(uptime)}' if uptime is not None else ""
		spacing: int = max(width - len(cls.name) - len(up), 1)
		return f'{Fx.b}{theme.title(cls.name)}{" " * spacing}{up}'

def center_overlay(lines: Sequence[str], term_width: int, term_height: int) -> List[str]:
	'''Center a block of lines, top_pad blank full width lines then every line shifted by left_pad'''
	box_width: int = max((visual_length(line) for line in lines), default=0)
	left_pad: int = max((term_width - box_width) // 2, 0)
	top_pad: int = max((term_height - len(lines)) // 2, 0)
	return [" " * term_width] * top_pad + [f'{" " * left_pad}{line}' for line in lines]

class HelpOverlay:
	title: str = "Help"
	box_width: int = 50
	keys: List[Tuple[str, str]] = [
		("q, Esc", "Quit"),
		("h, ?", "Toggle this help"),
		("s", "Cycle sorting: cpu, mem, pid, name"),
		("r", "Reverse sorting order"),
		("t", "Cycle color theme"),
		("i, Enter", "Show details of selected process"),
		("↑ ↓", "Move selection"),
		("Wheel", "Scroll process list"),
		("+ -", "Change refresh rate"),
		("k", "Terminate selected process"),
		("e", "Edit config file"),
	]

	@classmethod
	def draw(cls, term_width: int, term_height: int, theme: Theme) -> List[str]:
		width: int = min(cls.box_width, term_width)
		lines = [fit(f'{theme.highlight(pad_right(key, 10))} {text}', max(width - 2, 0)) for key, text in cls.keys]
		return center_overlay(box(lines, width, cls.title, ROUNDED, theme.title, theme.border), term_width, term_height)

class DetailOverlay:
	box_width: int = 60

	@classmethod
	def draw(cls, proc: ProcStat, term_width: int, term_height: int, theme: Theme) -> List[str]:
		width: int = min(cls.box_width, term_width)
		inner_width: int = max(width - 2, 0)
		fields: List[Tuple[str, str]] = [
			("PID", str(proc.pid)),
			("Name", proc.name),
			("User", proc.user),
			("State", proc.state or "?"),
			("CPU", f'{decimal(proc.cpu_percent)}%'),
			("Memory", f'{format_bytes(proc.memory_kb * 1024)} ({decimal(proc.mem_percent)}%)'),
			("CPU time", str(proc.cpu_time)),
			("Command", proc.command or proc.name),
		]
		lines = [fit(f'{theme.highlight(pad_right(label + ":", 10))}{value}', inner_width) for label, value in fields]
		return center_overlay(box(lines, width, f'Process {proc.pid}', ROUNDED, theme.title, theme.border), term_width, term_height)

class Compact:
	'''Two line summary for terminals too small for the full layout'''

	@staticmethod
	def draw(cpu: CpuMetrics, mem: MemMetrics, net: NetMetrics, width: int, theme: Theme) -> List[str]:
		bar_width: int = max((width - 30) // 2, 5)
		return [
			f'CPU {percentage_bar(cpu.overall, bar_width, theme.gradient["cpu"])}  MEM {percentage_bar(mem.used_percent, bar_width, theme.gradient["memory"])}',
			f'NET {Symbol.down}{pad_left(net.primary.rx_rate_str, 10)} {Symbol.up}{pad_left(net.primary.tx_rate_str, 10)}',
		]
