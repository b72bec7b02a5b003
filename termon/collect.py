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

'''Delta and rate calculations.

Every collector takes the current PlatformSnapshot plus the previous state dict and returns
a metrics record, including the state_data fragment the next tick needs. Nothing here keeps
state between calls.
'''

from math import floor
from typing import List, Set, Dict, Tuple, Optional, Any, Sequence, NamedTuple

from termon import history
from termon.ansi import truncate
from termon.fmt import Number, min_max, percentage, format_bytes, format_bytes_per_sec, format_frequency, format_temp, pad_left, pad_right, decimal
from termon.snapshot import PlatformSnapshot, CpuTimes, CpuInfo, Mount, DiskStat, Interface, Process, Sensor, parse_list

#* Sentinel total for cpu lines that already carry percentages
PERCENT_TOTAL: int = 100
#* Linux USER_HZ
TICKS_PER_SECOND: int = 100
SECTOR_SIZE: int = 512
DISK_RATE_CAP: int = 1_000_000_000
#* Used when the memory snapshot has no total
DEFAULT_TOTAL_MEMORY: int = 17179869184

SORT_KEYS: List[str] = ["cpu", "mem", "pid", "name"]

#? Rate primitives ------------------------------------------------------------------------------>

def throughput(current: Number, previous: Optional[Number], interval: Number) -> Number:
	'''Per second rate between two readings of a monotonic counter, resets and wraparounds give 0'''
	if previous is None or interval <= 0: return 0
	return max(current - previous, 0) / interval

def tick_percent(delta: Number, total_delta: Number) -> Number:
	return min_max(delta * 100 / max(total_delta, 1), 0, 100)

#? CPU ------------------------------------------------------------------------------------------>

class CpuUsage(NamedTuple):
	name: str
	pct: Number = 0
	user: Number = 0
	system: Number = 0
	idle: Number = 100
	iowait: Number = 0

class CpuMetrics(NamedTuple):
	usage: Tuple[CpuUsage, ...] = ()
	overall: Number = 0
	cores: Tuple[CpuUsage, ...] = ()
	history: List[Number] = []
	info: CpuInfo = CpuInfo()
	model: str = "Unknown CPU"
	frequency: str = ""
	summary: str = ""
	state_data: Dict[str, Any] = {}

def cpu_usage(current: Sequence[CpuTimes], previous: Sequence[CpuTimes] = ()) -> List[CpuUsage]:
	'''Percentages for every cpu line.
	If the first line has total == 100 every line already holds percentages and is passed through clamped,
	otherwise percentages come from tick deltas against the previous line with the same name.
	A line without a previous reading reports 0% usage.
	'''
	if not current: return []
	if current[0].total == PERCENT_TOTAL:
		return [CpuUsage(name=c.name, pct=min_max(c.active), user=min_max(c.user), system=min_max(c.system),
			idle=min_max(c.idle), iowait=min_max(c.iowait)) for c in current]

	prev_map: Dict[str, CpuTimes] = { p.name : p for p in previous }
	out: List[CpuUsage] = []
	for cur in current:
		prev = prev_map.get(cur.name)
		if prev is None:
			out.append(CpuUsage(name=cur.name))
			continue
		total_delta = cur.total - prev.total
		out.append(CpuUsage(
			name=cur.name,
			pct=tick_percent(cur.active - prev.active, total_delta),
			user=tick_percent(cur.user - prev.user, total_delta),
			system=tick_percent(cur.system - prev.system, total_delta),
			idle=tick_percent(cur.idle_total - prev.idle_total, total_delta),
			iowait=tick_percent(cur.iowait - prev.iowait, total_delta)))
	return out

class CpuCollector:
	'''Overall and per core usage plus the overall usage history'''

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any]) -> CpuMetrics:
		previous = parse_list(prev_state.get("cpuRaw"), CpuTimes.from_dict, "previous cpu")
		usage = cpu_usage(snapshot.cpu, previous)
		overall: Number = next((c.pct for c in usage if c.name == "cpu"), 0)
		cores = tuple(c for c in usage if c.name != "cpu")
		series = history.push(history.from_state(prev_state.get("cpuHistory")), overall)
		info = snapshot.cpu_info
		model = truncate(info.model, 30)
		return CpuMetrics(
			usage=tuple(usage),
			overall=overall,
			cores=cores,
			history=series,
			info=info,
			model=model,
			frequency=format_frequency(info.frequency),
			summary=f'{model} ({info.core_count} cores)',
			state_data={ "cpuRaw" : [c.to_dict() for c in snapshot.cpu], "cpuHistory" : series })

#? Memory --------------------------------------------------------------------------------------->

class MemMetrics(NamedTuple):
	used_percent: Number = 0
	total_str: str = "0 B"
	used_str: str = "0 B"
	available_str: str = "0 B"
	cached_str: str = "0 B"
	buffers_str: str = "0 B"
	summary: str = "0 B / 0 B"
	swap_used_percent: Number = 0
	swap_summary: str = "No swap"
	swap_active: bool = False
	pressure: str = "low"
	history: List[Number] = []
	state_data: Dict[str, Any] = {}

def pressure_level(used_percent: Number) -> str:
	if used_percent >= 90: return "critical"
	if used_percent >= 75: return "high"
	if used_percent >= 50: return "medium"
	return "low"

class MemCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any]) -> MemMetrics:
		mem = snapshot.memory
		swap = mem.swap
		used_percent = min_max(mem.used_percent)
		series = history.push(history.from_state(prev_state.get("memHistory")), used_percent)
		return MemMetrics(
			used_percent=used_percent,
			total_str=format_bytes(mem.total),
			used_str=format_bytes(mem.used),
			available_str=format_bytes(mem.available),
			cached_str=format_bytes(mem.cached),
			buffers_str=format_bytes(mem.buffers),
			summary=f'{format_bytes(mem.used)} / {format_bytes(mem.total)}',
			swap_used_percent=min_max(percentage(swap.used, swap.total)),
			swap_summary="No swap" if swap.total == 0 else f'{format_bytes(swap.used)} / {format_bytes(swap.total)}',
			swap_active=swap.used > 0,
			pressure=pressure_level(used_percent),
			history=series,
			state_data={ "memHistory" : series })

#? Disk ----------------------------------------------------------------------------------------->

class MountUsage(NamedTuple):
	mount_point: str
	device: str
	fs_type: str
	total: Number
	used: Number
	available: Number
	used_percent: Number
	used_str: str
	total_str: str
	available_str: str
	summary: str
	level: str

class DiskIO(NamedTuple):
	name: str
	read_rate: Number = 0
	write_rate: Number = 0
	read_rate_str: str = "0 B/s"
	write_rate_str: str = "0 B/s"

class DiskMetrics(NamedTuple):
	mounts: Tuple[MountUsage, ...] = ()
	io: Tuple[DiskIO, ...] = ()
	main: Optional[MountUsage] = None
	read_rate: Number = 0
	write_rate: Number = 0
	read_rate_str: str = "0 B/s"
	write_rate_str: str = "0 B/s"
	state_data: Dict[str, Any] = {}

def usage_level(used_percent: Number) -> str:
	if used_percent >= 95: return "critical"
	if used_percent >= 90: return "warning"
	if used_percent >= 75: return "high"
	return "normal"

def mount_usage(mount: Mount) -> MountUsage:
	used_percent = min_max(mount.used_percent)
	return MountUsage(
		mount_point=mount.mount_point, device=mount.device, fs_type=mount.fs_type,
		total=mount.total, used=mount.used, available=mount.available, used_percent=used_percent,
		used_str=format_bytes(mount.used), total_str=format_bytes(mount.total), available_str=format_bytes(mount.available),
		summary=f'{format_bytes(mount.used)} / {format_bytes(mount.total)}',
		level=usage_level(used_percent))

def filter_mounts(mounts: Sequence[Mount], disks_filter: str) -> List[Mount]:
	'''Comma separated mount points to show, prefix with "exclude=" to hide the listed ones instead'''
	if not disks_filter.strip(): return list(mounts)
	exclude: bool = disks_filter.startswith("exclude=")
	filtering = tuple(v.strip() for v in disks_filter.replace("exclude=", "").strip().split(",") if v.strip())
	return [m for m in mounts if (m.mount_point in filtering) != exclude]

def disk_io(current: Sequence[DiskStat], previous: Sequence[DiskStat] = (), interval: Number = 2, sector_size: int = SECTOR_SIZE) -> List[DiskIO]:
	prev_map: Dict[str, DiskStat] = { p.name : p for p in previous }
	out: List[DiskIO] = []
	for cur in current:
		prev = prev_map.get(cur.name)
		read = min_max(throughput(cur.sectors_read * sector_size, None if prev is None else prev.sectors_read * sector_size, interval), 0, DISK_RATE_CAP)
		write = min_max(throughput(cur.sectors_written * sector_size, None if prev is None else prev.sectors_written * sector_size, interval), 0, DISK_RATE_CAP)
		out.append(DiskIO(name=cur.name, read_rate=read, write_rate=write,
			read_rate_str=format_bytes_per_sec(read), write_rate_str=format_bytes_per_sec(write)))
	return out

class DiskCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any], interval: Number = 2, disks_filter: str = "") -> DiskMetrics:
		mounts = tuple(mount_usage(m) for m in filter_mounts(snapshot.mounts, disks_filter))
		previous = parse_list(prev_state.get("diskStats"), DiskStat.from_dict, "previous disk stat")
		io = tuple(disk_io(snapshot.disk_stats, previous, interval))
		read_rate: Number = sum(d.read_rate for d in io)
		write_rate: Number = sum(d.write_rate for d in io)
		return DiskMetrics(
			mounts=mounts,
			io=io,
			main=next((m for m in mounts if m.mount_point == "/"), None),
			read_rate=read_rate,
			write_rate=write_rate,
			read_rate_str=format_bytes_per_sec(read_rate),
			write_rate_str=format_bytes_per_sec(write_rate),
			state_data={ "diskStats" : [s.to_dict() for s in snapshot.disk_stats] })

#? Network -------------------------------------------------------------------------------------->

class IfaceRate(NamedTuple):
	name: str
	rx_bytes: Number = 0
	tx_bytes: Number = 0
	rx_rate: Number = 0
	tx_rate: Number = 0
	rx_rate_str: str = "0 B/s"
	tx_rate_str: str = "0 B/s"
	rx_total_str: str = "0 B"
	tx_total_str: str = "0 B"

class NetMetrics(NamedTuple):
	interfaces: Tuple[IfaceRate, ...] = ()
	primary: IfaceRate = IfaceRate(name="none")
	rx_history: List[Number] = []
	tx_history: List[Number] = []
	rx_rate: Number = 0
	tx_rate: Number = 0
	rx_rate_str: str = "0 B/s"
	tx_rate_str: str = "0 B/s"
	state_data: Dict[str, Any] = {}

def net_rates(current: Sequence[Interface], previous: Sequence[Interface] = (), interval: Number = 2) -> List[IfaceRate]:
	'''Throughput per interface matched by name, duplicate names keep the first entry'''
	prev_map: Dict[str, Interface] = {}
	for p in previous: prev_map.setdefault(p.name, p)
	out: List[IfaceRate] = []
	seen: Set[str] = set()
	for cur in current:
		if cur.name in seen: continue
		seen.add(cur.name)
		prev = prev_map.get(cur.name)
		rx = throughput(cur.rx_bytes, None if prev is None else prev.rx_bytes, interval)
		tx = throughput(cur.tx_bytes, None if prev is None else prev.tx_bytes, interval)
		out.append(IfaceRate(name=cur.name, rx_bytes=cur.rx_bytes, tx_bytes=cur.tx_bytes, rx_rate=rx, tx_rate=tx,
			rx_rate_str=format_bytes_per_sec(rx), tx_rate_str=format_bytes_per_sec(tx),
			rx_total_str=format_bytes(cur.rx_bytes), tx_total_str=format_bytes(cur.tx_bytes)))
	return out

def primary_interface(interfaces: Sequence[IfaceRate], preferred: str = "auto") -> IfaceRate:
	'''Preferred name if present, else first interface with any traffic, else the first one'''
	if preferred and preferred != "auto":
		for iface in interfaces:
			if iface.name == preferred: return iface
	for iface in interfaces:
		if iface.rx_bytes > 0 or iface.tx_bytes > 0: return iface
	return interfaces[0] if interfaces else IfaceRate(name="none")

class NetCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any], interval: Number = 2, preferred: str = "auto") -> NetMetrics:
		prev_net = prev_state.get("netData")
		previous = parse_list(prev_net.get("interfaces") if isinstance(prev_net, dict) else None, Interface.from_dict, "previous interface")
		interfaces = tuple(net_rates(snapshot.interfaces, previous, interval))
		primary = primary_interface(interfaces, preferred)
		prev_history = prev_state.get("netHistory") if isinstance(prev_state.get("netHistory"), dict) else {}
		rx_history = history.push(history.from_state(prev_history.get("rx")), primary.rx_rate)
		tx_history = history.push(history.from_state(prev_history.get("tx")), primary.tx_rate)
		rx_rate: Number = sum(i.rx_rate for i in interfaces)
		tx_rate: Number = sum(i.tx_rate for i in interfaces)
		return NetMetrics(
			interfaces=interfaces,
			primary=primary,
			rx_history=rx_history,
			tx_history=tx_history,
			rx_rate=rx_rate,
			tx_rate=tx_rate,
			rx_rate_str=format_bytes_per_sec(rx_rate),
			tx_rate_str=format_bytes_per_sec(tx_rate),
			state_data={ "netData" : { "interfaces" : [i.to_dict() for i in snapshot.interfaces] },
				"netHistory" : { "rx" : rx_history, "tx" : tx_history } })

#? Processes ------------------------------------------------------------------------------------>

class ProcStat(NamedTuple):
	pid: int
	name: str = "unknown"
	user: str = "?"
	state: str = ""
	cpu_time: Number = 0
	cpu_percent: Number = 0
	mem_percent: Number = 0
	memory_kb: Number = 0
	command: str = ""

class ProcMetrics(NamedTuple):
	processes: Tuple[ProcStat, ...] = ()
	count: int = 0
	filtered: bool = False
	sort_key: str = "cpu"
	sort_reversed: bool = False
	total_cpu: Number = 0
	total_mem: Number = 0
	running: int = 0
	sleeping: int = 0
	state_data: Dict[str, Any] = {}

def process_cpu_percent(process: Process, previous: Optional[Process], interval: Number = 2, core_count: int = 1, ticks_per_second: int = TICKS_PER_SECOND) -> Number:
	'''Pre computed nonzero percentages are used as is, otherwise cpu time ticks over the interval across all cores'''
	if process.cpu_percent > 0: return min_max(process.cpu_percent)
	if previous is None or interval <= 0: return 0
	delta = process.cpu_time - previous.cpu_time
	return min_max(delta / (interval * ticks_per_second * max(core_count, 1)) * 100)

def process_mem_percent(process: Process, total_memory: Number) -> Number:
	safe_total = total_memory if total_memory != 0 else 1
	return min_max(process.memory_kb * 100 / (safe_total / 1024))

def is_user_process(process: ProcStat) -> bool:
	return process.name not in ("", "kernel") and "[" not in process.name

def search(processes: Sequence[ProcStat], query: str) -> List[ProcStat]:
	'''Case insensitive substring match on the process name'''
	if not query: return list(processes)
	query = query.lower()
	return [p for p in processes if query in p.name.lower()]

def sort_processes(processes: Sequence[ProcStat], sort_key: str = "cpu", reverse: bool = False) -> List[ProcStat]:
	'''cpu and mem sort highest first, pid and name lowest first, unknown keys sort by cpu'''
	if sort_key == "memory": sort_key = "mem"
	if sort_key not in SORT_KEYS: sort_key = "cpu"
	if sort_key == "cpu": return sorted(processes, key=lambda p: p.cpu_percent, reverse=not reverse)
	if sort_key == "mem": return sorted(processes, key=lambda p: p.mem_percent, reverse=not reverse)
	if sort_key == "pid": return sorted(processes, key=lambda p: p.pid, reverse=reverse)
	return sorted(processes, key=lambda p: p.name, reverse=reverse)

def format_process(p: ProcStat, name_width: int = 30) -> str:
	return f'{pad_left(str(p.pid), 7)} {pad_right(truncate(p.user, 8), 8)} {pad_left(decimal(p.cpu_percent), 5)} {pad_left(decimal(p.mem_percent), 5)}  {truncate(p.name, name_width)}'

def format_header() -> str:
	return f'{pad_left("PID", 7)} {pad_right("USER", 8)} {pad_left("CPU%", 5)} {pad_left("MEM%", 5)}  NAME'

class ProcCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any], interval: Number = 2, sort_key: str = "cpu",
		sort_reversed: bool = False, process_filter: str = "") -> ProcMetrics:
		previous = { p.pid : p for p in parse_list(prev_state.get("processes"), Process.from_dict, "previous process") }
		core_count: int = snapshot.cpu_info.core_count or len([c for c in snapshot.cpu if c.name != "cpu"]) or 1
		total_memory: Number = snapshot.memory.total or DEFAULT_TOTAL_MEMORY
		stats: List[ProcStat] = []
		for p in snapshot.processes:
			stats.append(ProcStat(pid=p.pid, name=p.name, user=p.user, state=p.state, cpu_time=p.cpu_time,
				cpu_percent=process_cpu_percent(p, previous.get(p.pid), interval, core_count),
				mem_percent=process_mem_percent(p, total_memory), memory_kb=p.memory_kb, command=p.command))
		found = search([p for p in stats if is_user_process(p)], process_filter)
		return ProcMetrics(
			processes=tuple(sort_processes(found, sort_key, sort_reversed)),
			count=len(found),
			filtered=process_filter != "",
			sort_key=sort_key if sort_key in SORT_KEYS else ("mem" if sort_key == "memory" else "cpu"),
			sort_reversed=sort_reversed,
			total_cpu=sum(p.cpu_percent for p in found),
			total_mem=sum(p.mem_percent for p in found),
			running=len([p for p in found if p.state == "R"]),
			sleeping=len([p for p in found if p.state == "S"]),
			state_data={ "processes" : [{ "pid" : p.pid, "cpuTime" : p.cpu_time } for p in snapshot.processes] })

#? Temperature ---------------------------------------------------------------------------------->

class SensorReading(NamedTuple):
	name: str
	type: str
	temp: Number
	formatted: str
	status: str

class TempMetrics(NamedTuple):
	available: bool = False
	cpu_temp: Number = 0
	formatted: str = "N/A"
	status: str = "cool"
	max_temp: Number = 0
	avg_temp: Number = 0
	sensors: Tuple[SensorReading, ...] = ()
	history: List[Number] = []
	state_data: Dict[str, Any] = {}

def temp_status(celsius: Number) -> str:
	if celsius >= 95: return "critical"
	if celsius >= 85: return "hot"
	if celsius >= 70: return "warm"
	if celsius >= 50: return "normal"
	return "cool"

def cpu_sensor_temp(sensors: Sequence[Sensor]) -> Number:
	'''First sensor that looks like a cpu sensor, else the hottest one'''
	for s in sensors:
		if any(tag in s.type for tag in ("cpu", "CPU", "x86", "Core")): return s.temp
	return max((s.temp for s in sensors), default=0)

class TempCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any]) -> TempMetrics:
		temperature = snapshot.temperature
		sensors = temperature.sensors
		cpu_temp = temperature.cpu_temp if temperature.cpu_temp > 0 else cpu_sensor_temp(sensors)
		available: bool = temperature.cpu_temp > 0 or len(sensors) > 0
		series = history.push(history.from_state(prev_state.get("tempHistory")), cpu_temp)
		temps = [s.temp for s in sensors]
		return TempMetrics(
			available=available,
			cpu_temp=cpu_temp,
			formatted=format_temp(cpu_temp) if available else "N/A",
			status=temp_status(cpu_temp),
			max_temp=max(temps, default=0),
			avg_temp=sum(temps) / len(temps) if temps else 0,
			sensors=tuple(SensorReading(s.name, s.type, s.temp, format_temp(s.temp), temp_status(s.temp)) for s in sensors),
			history=series,
			state_data={ "tempHistory" : series })

#? Battery -------------------------------------------------------------------------------------->

class BatteryMetrics(NamedTuple):
	present: bool = False
	name: str = ""
	percent: Number = 0
	charging: bool = False
	level: str = ""
	icon: str = ""
	status: str = ""
	summary: str = "No battery"
	is_low: bool = False
	is_critical: bool = False
	history: List[Number] = []
	state_data: Dict[str, Any] = {}

def battery_level(pct: Number) -> str:
	if pct >= 90: return "full"
	if pct >= 50: return "good"
	if pct >= 25: return "low"
	if pct >= 10: return "critical"
	return "empty"

def battery_icon(charging: bool, full: bool, pct: Number) -> str:
	if full: return "🔋"
	if charging: return "⚡"
	if pct <= 10: return "🪫"
	return "🔋"

def battery_status(charging: bool, discharging: bool, full: bool, status: str) -> str:
	if full: return "Full"
	if charging: return "Charging"
	if discharging: return "Discharging"
	return status

class BatteryCollector:

	@staticmethod
	def collect(snapshot: PlatformSnapshot, prev_state: Dict[str, Any]) -> BatteryMetrics:
		info = snapshot.battery
		if not info.present or info.battery is None:
			carried = history.from_state(prev_state.get("batteryHistory"))
			return BatteryMetrics(history=carried, state_data={ "batteryHistory" : carried })
		bat = info.battery
		capacity = min_max(bat.capacity)
		status = battery_status(bat.charging, bat.discharging, bat.full, bat.status)
		icon = battery_icon(bat.charging, bat.full, capacity)
		series = history.push(history.from_state(prev_state.get("batteryHistory")), capacity)
		return BatteryMetrics(
			present=True,
			name=bat.name,
			percent=capacity,
			charging=bat.charging,
			level=battery_level(capacity),
			icon=icon,
			status=status,
			summary=f'{icon} {floor(capacity)}% ({status})',
			is_low=capacity <= 25,
			is_critical=capacity <= 10,
			history=series,
			state_data={ "batteryHistory" : series })
