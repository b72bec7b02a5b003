import pytest

from termon import snapshot
from termon.errors import SnapshotError, TermonError
from termon.snapshot import CpuTimes, Mount, Interface, Process, PlatformSnapshot, Uptime, LoadAverage

SAMPLE = {
	"cpu" : [{ "name" : "cpu", "user" : 100, "system" : 50, "idle" : 800, "iowait" : 50 }],
	"cpuInfo" : { "model" : "Test CPU", "coreCount" : 4, "frequency" : 2400 },
	"memory" : { "total" : 1000, "used" : 250, "available" : 750, "swap" : { "total" : 100, "used" : 10, "free" : 90 } },
	"disk" : {
		"mounts" : [{ "device" : "/dev/sda1", "mountPoint" : "/", "fsType" : "ext4", "total" : 200, "used" : 50, "available" : 150 }],
		"stats" : [{ "name" : "sda", "sectorsRead" : 10, "sectorsWritten" : 20 }],
	},
	"network" : { "interfaces" : [{ "name" : "eth0", "rxBytes" : 1000, "txBytes" : "2000" }] },
	"processes" : [{ "pid" : 1, "name" : "init", "user" : "root", "cpuTime" : 5, "memoryKb" : 1024 }],
	"temperature" : { "cpuTemp" : 45, "thermal" : [{ "name" : "Package", "type" : "x86_pkg_temp", "temp" : 47 }] },
	"battery" : { "present" : True, "battery" : { "capacity" : 80, "charging" : True } },
	"uptime" : 3600,
	"loadAvg" : { "load1" : 0.5, "load5" : 0.25, "load15" : 0.1 },
}

def test_from_dict():
	snap = snapshot.from_dict(SAMPLE)
	assert isinstance(snap, PlatformSnapshot)
	assert snap.cpu_info.model == "Test CPU" and snap.cpu_info.core_count == 4
	assert snap.memory.used_percent == 25
	assert snap.memory.swap.used == 10
	assert snap.mounts[0].mount_point == "/" and snap.mounts[0].used_percent == 25
	assert snap.disk_stats[0].sectors_written == 20
	assert snap.interfaces[0].tx_bytes == 2000
	assert snap.processes[0].memory_kb == 1024
	assert snap.temperature.cpu_temp == 45 and snap.temperature.sensors[0].temp == 47
	assert snap.battery.present and snap.battery.battery.capacity == 80
	assert snap.uptime == Uptime(3600)
	assert snap.load_avg == LoadAverage(0.5, 0.25, 0.1)

def test_from_dict_empty():
	assert snapshot.from_dict({}) == PlatformSnapshot()
	assert snapshot.from_dict(None) == PlatformSnapshot()
	assert snapshot.from_dict([1, 2]) == PlatformSnapshot()

def test_from_dict_uptime_object():
	assert snapshot.from_dict({ "uptime" : { "seconds" : 60 } }).uptime == Uptime(60)
	assert snapshot.from_dict({}).uptime is None

def test_CpuTimes_derived():
	times = CpuTimes.from_dict(SAMPLE["cpu"][0])
	assert times.total == 1000
	assert times.idle_total == 850
	assert times.active == 150
	assert CpuTimes.from_dict(times.to_dict()) == times

def test_CpuTimes_given_totals():
	times = CpuTimes.from_dict({ "name" : "cpu", "total" : 1000, "active" : 100 })
	assert times.total == 1000 and times.active == 100

def test_malformed_entries_dropped():
	snap = snapshot.from_dict({
		"processes" : [{ "name" : "nopid" }, { "pid" : 2, "name" : "ok" }, "junk"],
		"network" : { "interfaces" : [{ "name" : "eth0", "rxBytes" : "abc" }, { "rxBytes" : 5 }, { "name" : "wlan0" }] },
		"temperature" : { "thermal" : [{ "name" : "notemp" }] },
	})
	assert [p.pid for p in snap.processes] == [2]
	assert [i.name for i in snap.interfaces] == ["wlan0"]
	assert snap.temperature.sensors == ()

def test_malformed_section_defaults():
	snap = snapshot.from_dict({ "memory" : "full", "cpuInfo" : { "coreCount" : "many" } })
	assert snap.memory == PlatformSnapshot().memory
	assert snap.cpu_info == PlatformSnapshot().cpu_info

def test_Mount_defaults():
	mount = Mount.from_dict({})
	assert mount.mount_point == "/"
	assert mount.used_percent == 0

def test_record_validators_raise():
	with pytest.raises(SnapshotError):
		Process.from_dict({ "name" : "x" })
	assert issubclass(SnapshotError, TermonError) and issubclass(SnapshotError, ValueError)

def test_Interface_round_trip():
	iface = Interface.from_dict({ "name" : "eth0", "rxBytes" : 1, "rxPackets" : 2, "txBytes" : 3, "txPackets" : 4 })
	assert Interface.from_dict(iface.to_dict()) == iface

@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan", "inf", "-Infinity"])
def test_non_finite_dropped(value):
	snap = snapshot.from_dict({
		"network" : { "interfaces" : [{ "name" : "eth0", "rxBytes" : value }, { "name" : "eth1", "rxBytes" : 10 }] },
		"uptime" : value,
	})
	assert [i.name for i in snap.interfaces] == ["eth1"]
	assert snap.uptime is None

def test_non_finite_section_defaults():
	snap = snapshot.from_dict({ "memory" : { "total" : float("nan") }, "loadAvg" : { "load1" : "inf" } })
	assert snap.memory == snapshot.MemoryInfo()
	assert snap.load_avg == LoadAverage()
