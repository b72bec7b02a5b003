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

'''Typed per-tick platform records.

Everything coming from a snapshot provider passes through from_dict() once, after that
the rest of termon works on these records and never checks for missing keys again.
Entries that fail validation are dropped from their list, a missing optional field gets
the default declared on the record.
'''

from math import isfinite
from typing import List, Dict, Tuple, Optional, Union, Any, Callable, NamedTuple

from termon.errors import SnapshotError
from termon.fmt import Number, percentage
from termon.log import errlog

#? Field validation helpers ----------------------------------------------------------------->

def _num(entry: Dict[str, Any], key: str, default: Number = 0) -> Number:
	value = entry.get(key, default)
	if value is None: return default
	if isinstance(value, bool):
		raise SnapshotError(f'"{key}" should be a number, got {value!r}')
	if isinstance(value, str):
		try:
			value = int(value)
		except ValueError:
			try:
				value = float(value)
			except ValueError:
				pass
	if isinstance(value, int): return value
	if isinstance(value, float):
		if not isfinite(value): raise SnapshotError(f'"{key}" should be a finite number, got {value!r}')
		return value
	raise SnapshotError(f'"{key}" should be a number, got {value!r}')

def _int(entry: Dict[str, Any], key: str, default: int = 0) -> int:
	value = _num(entry, key, default)
	if isinstance(value, float):
		if not value.is_integer(): raise SnapshotError(f'"{key}" should be an integer, got {value!r}')
		value = int(value)
	return value

def _str(entry: Dict[str, Any], key: str, default: str = "") -> str:
	value = entry.get(key, default)
	if value is None: return default
	if isinstance(value, (str, int, float)) and not isinstance(value, bool): return str(value)
	raise SnapshotError(f'"{key}" should be a string, got {value!r}')

def _bool(entry: Dict[str, Any], key: str, default: bool = False) -> bool:
	value = entry.get(key, default)
	if value is None: return default
	if isinstance(value, bool): return value
	if isinstance(value, (int, float)): return value != 0
	if isinstance(value, str) and value.lower() in ("true", "false", "1", "0"):
		return value.lower() in ("true", "1")
	raise SnapshotError(f'"{key}" should be true or false, got {value!r}')

def _required(entry: Dict[str, Any], key: str):
	if entry.get(key) in (None, ""):
		raise SnapshotError(f'missing required field "{key}"')

def _mapping(value: Any, kind: str) -> Dict[str, Any]:
	if value is None: return {}
	if not isinstance(value, dict):
		raise SnapshotError(f'{kind} should be an object, got {type(value).__name__}')
	return value

def parse_list(raw: Any, parser: Callable[[Dict[str, Any]], Any], kind: str) -> Tuple:
	'''Parse every entry with parser, malformed entries are logged and dropped'''
	if raw is None: return ()
	if not isinstance(raw, (list, tuple)):
		errlog.debug(f'Dropped {kind} list, expected a list got {type(raw).__name__}')
		return ()
	out: List[Any] = []
	for entry in raw:
		try:
			out.append(parser(_mapping(entry, kind)))
		except SnapshotError as e:
			errlog.debug(f'Dropped malformed {kind} entry: {e}')
	return tuple(out)

#? Records ---------------------------------------------------------------------------------->

class CpuTimes(NamedTuple):
	'''One cpu line, either cumulative ticks or (with total == 100) ready made percentages'''
	name: str
	user: Number = 0
	nice: Number = 0
	system: Number = 0
	idle: Number = 0
	iowait: Number = 0
	irq: Number = 0
	softirq: Number = 0
	steal: Number = 0
	total: Number = 0
	idle_total: Number = 0
	active: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "CpuTimes":
		_required(entry, "name")
		fields: Dict[str, Number] = { f : _num(entry, f) for f in ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal") }
		total = _num(entry, "total", sum(fields.values()))
		idle_total = _num(entry, "idleTotal", fields["idle"] + fields["iowait"])
		active = _num(entry, "active", total - idle_total)
		return cls(name=_str(entry, "name"), total=total, idle_total=idle_total, active=active, **fields)

	def to_dict(self) -> Dict[str, Any]:
		return { "name" : self.name, "user" : self.user, "nice" : self.nice, "system" : self.system, "idle" : self.idle,
			"iowait" : self.iowait, "irq" : self.irq, "softirq" : self.softirq, "steal" : self.steal,
			"total" : self.total, "idleTotal" : self.idle_total, "active" : self.active }

class CpuInfo(NamedTuple):
	model: str = "Unknown CPU"
	core_count: int = 0
	frequency: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "CpuInfo":
		return cls(model=_str(entry, "model", "Unknown CPU"), core_count=_int(entry, "coreCount"), frequency=_num(entry, "frequency"))

class SwapInfo(NamedTuple):
	total: Number = 0
	used: Number = 0
	free: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "SwapInfo":
		return cls(total=_num(entry, "total"), used=_num(entry, "used"), free=_num(entry, "free"))

class MemoryInfo(NamedTuple):
	'''All values in bytes'''
	total: Number = 0
	used: Number = 0
	available: Number = 0
	cached: Number = 0
	buffers: Number = 0
	used_percent: Number = 0
	swap: SwapInfo = SwapInfo()

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "MemoryInfo":
		total, used = _num(entry, "total"), _num(entry, "used")
		return cls(total=total, used=used, available=_num(entry, "available"), cached=_num(entry, "cached"),
			buffers=_num(entry, "buffers"), used_percent=_num(entry, "usedPercent", percentage(used, total)),
			swap=SwapInfo.from_dict(_mapping(entry.get("swap"), "swap")))

class Mount(NamedTuple):
	device: str = "unknown"
	mount_point: str = "/"
	fs_type: str = "unknown"
	total: Number = 0
	used: Number = 0
	available: Number = 0
	used_percent: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Mount":
		total, used = _num(entry, "total"), _num(entry, "used")
		return cls(device=_str(entry, "device", "unknown"), mount_point=_str(entry, "mountPoint", "/"),
			fs_type=_str(entry, "fsType", "unknown"), total=total, used=used, available=_num(entry, "available"),
			used_percent=_num(entry, "usedPercent", percentage(used, total)))

class DiskStat(NamedTuple):
	'''Cumulative sector counters of one block device'''
	name: str
	sectors_read: Number = 0
	sectors_written: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "DiskStat":
		_required(entry, "name")
		return cls(name=_str(entry, "name"), sectors_read=_num(entry, "sectorsRead"), sectors_written=_num(entry, "sectorsWritten"))

	def to_dict(self) -> Dict[str, Any]:
		return { "name" : self.name, "sectorsRead" : self.sectors_read, "sectorsWritten" : self.sectors_written }

class Interface(NamedTuple):
	'''Cumulative byte and packet counters of one network interface'''
	name: str
	rx_bytes: Number = 0
	rx_packets: Number = 0
	tx_bytes: Number = 0
	tx_packets: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Interface":
		_required(entry, "name")
		return cls(name=_str(entry, "name"), rx_bytes=_num(entry, "rxBytes"), rx_packets=_num(entry, "rxPackets"),
			tx_bytes=_num(entry, "txBytes"), tx_packets=_num(entry, "txPackets"))

	def to_dict(self) -> Dict[str, Any]:
		return { "name" : self.name, "rxBytes" : self.rx_bytes, "rxPackets" : self.rx_packets,
			"txBytes" : self.tx_bytes, "txPackets" : self.tx_packets }

class Process(NamedTuple):
	pid: int
	name: str = "unknown"
	user: str = "?"
	state: str = ""
	cpu_time: Number = 0
	cpu_percent: Number = 0
	memory_kb: Number = 0
	command: str = ""

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Process":
		_required(entry, "pid")
		return cls(pid=_int(entry, "pid"), name=_str(entry, "name", "unknown"), user=_str(entry, "user", "?"),
			state=_str(entry, "state"), cpu_time=_num(entry, "cpuTime"), cpu_percent=_num(entry, "cpuPercent"),
			memory_kb=_num(entry, "memoryKb"), command=_str(entry, "command"))

class Sensor(NamedTuple):
	name: str = ""
	type: str = "unknown"
	temp: Number = 0

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Sensor":
		_required(entry, "temp")
		return cls(name=_str(entry, "name"), type=_str(entry, "type", "unknown"), temp=_num(entry, "temp"))

class Temperature(NamedTuple):
	cpu_temp: Number = 0
	sensors: Tuple[Sensor, ...] = ()

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Temperature":
		return cls(cpu_temp=_num(entry, "cpuTemp"), sensors=parse_list(entry.get("thermal"), Sensor.from_dict, "sensor"))

class Battery(NamedTuple):
	name: str = "Battery"
	capacity: Number = 100
	charging: bool = False
	discharging: bool = False
	full: bool = False
	status: str = "Unknown"

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "Battery":
		return cls(name=_str(entry, "name", "Battery"), capacity=_num(entry, "capacity", 100), charging=_bool(entry, "charging"),
			discharging=_bool(entry, "discharging"), full=_bool(entry, "full"), status=_str(entry, "status", "Unknown"))

class BatteryInfo(NamedTuple):
	present: bool = False
	battery: Optional[Battery] = None

	@classmethod
	def from_dict(cls, entry: Dict[str, Any]) -> "BatteryInfo":
		raw = entry.get("battery")
		battery = Battery.from_dict(_mapping(raw, "battery")) if raw is not None else None
		return cls(present=_bool(entry, "present") and battery is not None, battery=battery)

class Uptime(NamedTuple):
	seconds: Number = 0

class LoadAverage(NamedTuple):
	load1: Number = 0
	load5: Number = 0
	load15: Number = 0

class PlatformSnapshot(NamedTuple):
	'''Everything the provider reports for one tick'''
	cpu: Tuple[CpuTimes, ...] = ()
	cpu_info: CpuInfo = CpuInfo()
	memory: MemoryInfo = MemoryInfo()
	mounts: Tuple[Mount, ...] = ()
	disk_stats: Tuple[DiskStat, ...] = ()
	interfaces: Tuple[Interface, ...] = ()
	processes: Tuple[Process, ...] = ()
	temperature: Temperature = Temperature()
	battery: BatteryInfo = BatteryInfo()
	uptime: Optional[Uptime] = None
	load_avg: LoadAverage = LoadAverage()

def _section(parser: Callable[[Dict[str, Any]], Any], raw: Any, kind: str, default: Any) -> Any:
	try:
		return parser(_mapping(raw, kind))
	except SnapshotError as e:
		errlog.debug(f'Using defaults for malformed {kind} section: {e}')
		return default

def from_dict(data: Union[Dict[str, Any], None]) -> PlatformSnapshot:
	'''Validate a provider dict (camelCase keys) into a PlatformSnapshot.
	Sections that are missing or malformed get their empty defaults.'''
	if not isinstance(data, dict):
		if data is not None: errlog.warning(f'Snapshot should be an object, got {type(data).__name__}')
		return PlatformSnapshot()
	disk = data.get("disk") if isinstance(data.get("disk"), dict) else {}
	network = data.get("network") if isinstance(data.get("network"), dict) else {}
	uptime_raw = data.get("uptime")
	uptime: Optional[Uptime] = None
	if isinstance(uptime_raw, (int, float)) and not isinstance(uptime_raw, bool):
		uptime_raw = { "seconds" : uptime_raw }
	if isinstance(uptime_raw, dict):
		uptime = _section(lambda e: Uptime(seconds=_num(e, "seconds")), uptime_raw, "uptime", None)
	return PlatformSnapshot(
		cpu=parse_list(data.get("cpu"), CpuTimes.from_dict, "cpu"),
		cpu_info=_section(CpuInfo.from_dict, data.get("cpuInfo"), "cpuInfo", CpuInfo()),
		memory=_section(MemoryInfo.from_dict, data.get("memory"), "memory", MemoryInfo()),
		mounts=parse_list(disk.get("mounts"), Mount.from_dict, "mount"),
		disk_stats=parse_list(disk.get("stats"), DiskStat.from_dict, "disk stat"),
		interfaces=parse_list(network.get("interfaces"), Interface.from_dict, "interface"),
		processes=parse_list(data.get("processes"), Process.from_dict, "process"),
		temperature=_section(Temperature.from_dict, data.get("temperature"), "temperature", Temperature()),
		battery=_section(BatteryInfo.from_dict, data.get("battery"), "battery", BatteryInfo()),
		uptime=uptime,
		load_avg=_section(lambda e: LoadAverage(_num(e, "load1"), _num(e, "load5"), _num(e, "load15")), data.get("loadAvg"), "loadAvg", LoadAverage()),
	)
