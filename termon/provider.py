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

'''Host side snapshot provider backed by psutil.

Builds the same camelCase dict a foreign provider would hand over and validates it through
snapshot.from_dict, so the core only ever sees PlatformSnapshot records.
'''

import os, re, platform
from time import time
from typing import List, Dict, Any, Optional

import psutil

from termon.collect import TICKS_PER_SECOND, SECTOR_SIZE
from termon.log import errlog
from termon.snapshot import PlatformSnapshot, from_dict

#* psutil process status to ps style state letter
STATES: Dict[str, str] = {
	"running" : "R", "sleeping" : "S", "disk-sleep" : "D", "stopped" : "T", "tracing-stop" : "t",
	"zombie" : "Z", "dead" : "X", "idle" : "I", "waking" : "W", "parked" : "P", "locked" : "L", "waiting" : "W"
}

CPU_SENSORS: List[str] = ["coretemp", "k10temp", "zenpower", "cpu_thermal", "cpu-thermal", "acpitz"]

def cpu_name() -> str:
	'''Model name from /proc/cpuinfo, else whatever platform reports'''
	if os.path.isfile("/proc/cpuinfo"):
		with open("/proc/cpuinfo", "r") as f:
			for line in f:
				if line.startswith("model name"):
					return re.sub(r"\s+", " ", line.split(":", 1)[1]).strip()
	return platform.processor() or "Unknown CPU"

class PsutilProvider:
	'''Each section is collected on its own, a failing section is logged and left empty'''
	sections: List[str] = ["cpu", "cpuInfo", "memory", "disk", "network", "processes", "temperature", "battery", "uptime", "loadAvg"]

	def __init__(self, check_temp: bool = True, show_battery: bool = True):
		self.check_temp = check_temp
		self.show_battery = show_battery

	def collect(self) -> PlatformSnapshot:
		return from_dict(self.collect_dict())

	def collect_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {}
		for section in self.sections:
			if section == "temperature" and not self.check_temp: continue
			if section == "battery" and not self.show_battery: continue
			try:
				out[section] = getattr(self, f'_{section}')()
			except Exception as e:
				errlog.exception(f'Failed collecting {section}: {e}')
		return out

	@staticmethod
	def _ticks(times) -> Dict[str, Any]:
		return { f : getattr(times, f, 0) * TICKS_PER_SECOND for f in ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal") }

	def _cpu(self) -> List[Dict[str, Any]]:
		out: List[Dict[str, Any]] = [{ "name" : "cpu", **self._ticks(psutil.cpu_times()) }]
		for n, times in enumerate(psutil.cpu_times(percpu=True)):
			out.append({ "name" : f'cpu{n}', **self._ticks(times) })
		return out

	def _cpuInfo(self) -> Dict[str, Any]:
		freq = psutil.cpu_freq() if hasattr(psutil, "cpu_freq") else None
		return { "model" : cpu_name(), "coreCount" : psutil.cpu_count(logical=True) or 0, "frequency" : getattr(freq, "current", 0) or 0 }

	def _memory(self) -> Dict[str, Any]:
		mem = psutil.virtual_memory()
		swap = psutil.swap_memory()
		return {
			"total" : mem.total, "used" : mem.used, "available" : mem.available,
			"cached" : getattr(mem, "cached", 0), "buffers" : getattr(mem, "buffers", 0), "usedPercent" : mem.percent,
			"swap" : { "total" : swap.total, "used" : swap.used, "free" : swap.free },
		}

	def _disk(self) -> Dict[str, Any]:
		mounts: List[Dict[str, Any]] = []
		for part in psutil.disk_partitions(all=False):
			try:
				usage = psutil.disk_usage(part.mountpoint)
			except (PermissionError, FileNotFoundError, OSError) as e:
				errlog.debug(f'Skipping mount {part.mountpoint}: {e}')
				continue
			mounts.append({ "device" : part.device, "mountPoint" : part.mountpoint, "fsType" : part.fstype,
				"total" : usage.total, "used" : usage.used, "available" : usage.free, "usedPercent" : usage.percent })
		stats: List[Dict[str, Any]] = []
		for name, io in (psutil.disk_io_counters(perdisk=True, nowrap=True) or {}).items():
			stats.append({ "name" : name, "sectorsRead" : io.read_bytes // SECTOR_SIZE, "sectorsWritten" : io.write_bytes // SECTOR_SIZE })
		return { "mounts" : mounts, "stats" : stats }

	def _network(self) -> Dict[str, Any]:
		interfaces: List[Dict[str, Any]] = []
		for name, io in psutil.net_io_counters(pernic=True, nowrap=True).items():
			if name == "lo": continue
			interfaces.append({ "name" : name, "rxBytes" : io.bytes_recv, "rxPackets" : io.packets_recv,
				"txBytes" : io.bytes_sent, "txPackets" : io.packets_sent })
		return { "interfaces" : interfaces }

	def _processes(self) -> List[Dict[str, Any]]:
		out: List[Dict[str, Any]] = []
		for p in psutil.process_iter(["pid", "name", "username", "status", "cpu_times", "memory_info", "cmdline"]):
			info = p.info
			cpu_times = info["cpu_times"]
			memory = info["memory_info"]
			out.append({
				"pid" : info["pid"],
				"name" : info["name"] or "unknown",
				"user" : info["username"] or "?",
				"state" : STATES.get(info["status"] or "", ""),
				"cpuTime" : round((cpu_times.user + cpu_times.system) * TICKS_PER_SECOND) if cpu_times else 0,
				"memoryKb" : memory.rss // 1024 if memory else 0,
				"command" : " ".join(info["cmdline"] or []),
			})
		return out

	def _temperature(self) -> Dict[str, Any]:
		if not hasattr(psutil, "sensors_temperatures"): return {}
		sensors: List[Dict[str, Any]] = []
		cpu_temp: float = 0
		for name, entries in (psutil.sensors_temperatures() or {}).items():
			for num, entry in enumerate(entries, 1):
				if entry.current is None: continue
				sensors.append({ "name" : entry.label or f'{name}{num}', "type" : name, "temp" : entry.current })
				if not cpu_temp and name in CPU_SENSORS:
					cpu_temp = entry.current
		return { "cpuTemp" : cpu_temp, "thermal" : sensors }

	def _battery(self) -> Dict[str, Any]:
		battery = psutil.sensors_battery() if hasattr(psutil, "sensors_battery") else None
		if battery is None: return { "present" : False }
		plugged: Optional[bool] = battery.power_plugged
		full: bool = bool(plugged) and battery.percent >= 100
		status: str = "Full" if full else ("Charging" if plugged else ("Discharging" if plugged is False else "Unknown"))
		return { "present" : True, "battery" : {
			"name" : "BAT0", "capacity" : battery.percent, "charging" : bool(plugged) and not full,
			"discharging" : plugged is False, "full" : full, "status" : status } }

	def _uptime(self) -> float:
		return time() - psutil.boot_time()

	def _loadAvg(self) -> Dict[str, Any]:
		load1, load5, load15 = psutil.getloadavg()
		return { "load1" : round(load1, 2), "load5" : round(load5, 2), "load15" : round(load15, 2) }
