import pytest

from termon import snapshot
from termon.collect import (CpuCollector, MemCollector, DiskCollector, NetCollector, ProcCollector, TempCollector, BatteryCollector,
	ProcStat, IfaceRate, throughput, tick_percent, cpu_usage, net_rates, disk_io, primary_interface, filter_mounts,
	process_cpu_percent, process_mem_percent, search, sort_processes, format_process, format_header,
	pressure_level, usage_level, temp_status, cpu_sensor_temp, battery_level, DISK_RATE_CAP)
from termon.snapshot import CpuTimes, DiskStat, Interface, Mount, Process, Sensor, PlatformSnapshot

def test_throughput():
	assert throughput(1500, 1000, 2) == 250
	assert throughput(500, 1000, 2) == 0
	assert throughput(1500, None, 2) == 0
	assert throughput(1500, 1000, 0) == 0

def test_tick_percent():
	assert tick_percent(50, 100) == 50
	assert tick_percent(50, 0) == 100
	assert tick_percent(-10, 100) == 0
	assert tick_percent(500, 100) == 100

def test_CpuCollector_collect():
	snap = snapshot.from_dict({ "cpu" : [{ "name" : "cpu", "total" : 1100, "active" : 150 }] })
	prev = { "cpuRaw" : [{ "name" : "cpu", "total" : 1000, "active" : 100 }], "cpuHistory" : [10, 20] }
	metrics = CpuCollector.collect(snap, prev)
	assert metrics.overall == 50
	assert metrics.history == [10, 20, 50]
	assert metrics.state_data["cpuRaw"][0]["total"] == 1100
	assert metrics.state_data["cpuHistory"] == [10, 20, 50]

def test_CpuCollector_cold_start():
	snap = snapshot.from_dict({ "cpu" : [{ "name" : "cpu", "total" : 1100, "active" : 150 }, { "name" : "cpu0", "total" : 550, "active" : 75 }] })
	metrics = CpuCollector.collect(snap, {})
	assert metrics.overall == 0
	assert len(metrics.cores) == 1 and metrics.cores[0].pct == 0 and metrics.cores[0].idle == 100
	assert metrics.history == [0]

def test_cpu_usage_pass_through():
	current = [CpuTimes("cpu", total=100, active=37), CpuTimes("cpu0", total=100, active=120)]
	usage = cpu_usage(current, [CpuTimes("cpu", total=5000, active=10)])
	assert usage[0].pct == 37
	assert usage[1].pct == 100

def test_cpu_usage_zero_total_delta():
	times = CpuTimes("cpu", total=1000, active=100)
	assert cpu_usage([times], [times])[0].pct == 0

def test_cpu_usage_empty():
	assert cpu_usage([]) == []

def test_cpu_usage_counter_reset():
	usage = cpu_usage([CpuTimes("cpu", total=950, active=90)], [CpuTimes("cpu", total=1000, active=100)])
	assert usage[0].pct == 0

DELTAS = [-10**12, -500, -1, 0, 1, 50, 10**12]

@pytest.mark.parametrize("total_delta", DELTAS)
@pytest.mark.parametrize("active_delta", DELTAS)
def test_cpu_usage_bounded(total_delta, active_delta):
	previous = CpuTimes("cpu", total=10**6, active=10**5)
	current = CpuTimes("cpu", total=10**6 + total_delta, active=10**5 + active_delta)
	pct = cpu_usage([current], [previous])[0].pct
	assert 0 <= pct <= 100
	if active_delta <= 0: assert pct == 0

@pytest.mark.parametrize("time_delta", DELTAS)
@pytest.mark.parametrize("interval", [-2, 0, 0.001, 2, 10**6])
def test_process_cpu_percent_bounded(time_delta, interval):
	previous = Process(pid=1, cpu_time=10**6)
	current = Process(pid=1, cpu_time=10**6 + time_delta)
	pct = process_cpu_percent(current, previous, interval, 4)
	assert 0 <= pct <= 100
	if time_delta <= 0 or interval <= 0: assert pct == 0

def test_MemCollector_collect():
	snap = snapshot.from_dict({ "memory" : { "total" : 1000, "used" : 800, "swap" : { "total" : 0 } } })
	metrics = MemCollector.collect(snap, { "memHistory" : [1, 2] })
	assert metrics.used_percent == 80
	assert metrics.pressure == "high"
	assert metrics.swap_summary == "No swap"
	assert metrics.summary == "800 B / 1000 B"
	assert metrics.history == [1, 2, 80]

def test_pressure_level():
	assert [pressure_level(p) for p in (10, 50, 75, 90)] == ["low", "medium", "high", "critical"]

def test_net_rates():
	previous = [Interface("eth0", rx_bytes=1000, tx_bytes=1000)]
	current = [Interface("eth0", rx_bytes=1500, tx_bytes=500), Interface("eth0", rx_bytes=9999), Interface("wlan0", rx_bytes=10)]
	rates = net_rates(current, previous, 2)
	assert [r.name for r in rates] == ["eth0", "wlan0"]
	assert rates[0].rx_rate == 250 and rates[0].rx_rate_str == "250.0 B/s"
	assert rates[0].tx_rate == 0
	assert rates[1].rx_rate == 0

def test_NetCollector_collect():
	snap = snapshot.from_dict({ "network" : { "interfaces" : [{ "name" : "lo0" }, { "name" : "eth0", "rxBytes" : 1500, "txBytes" : 3000 }] } })
	prev = { "netData" : { "interfaces" : [{ "name" : "eth0", "rxBytes" : 1000, "txBytes" : 1000 }] }, "netHistory" : { "rx" : [5], "tx" : "bad" } }
	metrics = NetCollector.collect(snap, prev, 2)
	assert metrics.primary.name == "eth0"
	assert metrics.primary.rx_rate_str == "250.0 B/s"
	assert metrics.primary.tx_rate_str == "1000.0 B/s"
	assert metrics.rx_history == [5, 250]
	assert metrics.tx_history == [1000]
	assert metrics.state_data["netData"]["interfaces"][1]["rxBytes"] == 1500

def test_primary_interface():
	ifaces = [IfaceRate("lo"), IfaceRate("eth0", rx_bytes=10), IfaceRate("wlan0", tx_bytes=5)]
	assert primary_interface(ifaces).name == "eth0"
	assert primary_interface(ifaces, "wlan0").name == "wlan0"
	assert primary_interface(ifaces, "missing").name == "eth0"
	assert primary_interface([IfaceRate("lo")]).name == "lo"
	assert primary_interface([]).name == "none"

def test_disk_io():
	io = disk_io([DiskStat("sda", 300, 100)], [DiskStat("sda", 100, 100)], 2)
	assert io[0].read_rate == 51200
	assert io[0].write_rate == 0
	capped = disk_io([DiskStat("sda", 10 ** 12, 0)], [DiskStat("sda", 0, 0)], 1)
	assert capped[0].read_rate == DISK_RATE_CAP
	assert disk_io([DiskStat("sdb", 5, 5)], [], 2)[0].read_rate == 0

def test_DiskCollector_empty():
	metrics = DiskCollector.collect(PlatformSnapshot(), {})
	assert metrics.read_rate_str == "0 B/s"
	assert metrics.write_rate_str == "0 B/s"
	assert metrics.mounts == () and metrics.main is None

def test_DiskCollector_collect():
	snap = snapshot.from_dict({ "disk" : {
		"mounts" : [{ "mountPoint" : "/", "total" : 100, "used" : 96 }, { "mountPoint" : "/boot", "total" : 100, "used" : 10 }],
		"stats" : [{ "name" : "sda", "sectorsRead" : 4, "sectorsWritten" : 0 }] } })
	metrics = DiskCollector.collect(snap, { "diskStats" : [{ "name" : "sda", "sectorsRead" : 0, "sectorsWritten" : 0 }] }, 2, "exclude=/boot")
	assert [m.mount_point for m in metrics.mounts] == ["/"]
	assert metrics.main.level == "critical"
	assert metrics.read_rate == 1024
	assert metrics.read_rate_str == "1.0 KB/s"
	assert metrics.state_data == { "diskStats" : [{ "name" : "sda", "sectorsRead" : 4, "sectorsWritten" : 0 }] }

def test_filter_mounts():
	mounts = [Mount(mount_point="/"), Mount(mount_point="/home"), Mount(mount_point="/boot")]
	assert [m.mount_point for m in filter_mounts(mounts, "")] == ["/", "/home", "/boot"]
	assert [m.mount_point for m in filter_mounts(mounts, "/, /home")] == ["/", "/home"]
	assert [m.mount_point for m in filter_mounts(mounts, "exclude=/boot")] == ["/", "/home"]

def test_usage_level():
	assert [usage_level(p) for p in (10, 75, 90, 95)] == ["normal", "high", "warning", "critical"]

def test_process_cpu_percent():
	current = Process(pid=1, cpu_time=300)
	previous = Process(pid=1, cpu_time=100)
	assert process_cpu_percent(current, previous, 2, 1) == 100
	assert process_cpu_percent(current, previous, 2, 2) == 50
	assert process_cpu_percent(current, None, 2, 1) == 0
	assert process_cpu_percent(Process(pid=1, cpu_percent=12.5), None, 2, 1) == 12.5
	assert process_cpu_percent(Process(pid=1, cpu_time=50), previous, 2, 1) == 0

def test_process_mem_percent():
	assert process_mem_percent(Process(pid=1, memory_kb=1048576), 4 * 1024 ** 3) == 25
	assert process_mem_percent(Process(pid=1, memory_kb=1), 0) == 100

def test_search_and_sort():
	procs = [ProcStat(3, "Firefox", cpu_percent=5, mem_percent=30), ProcStat(1, "bash", cpu_percent=50, mem_percent=1),
		ProcStat(2, "fire-tool", cpu_percent=20, mem_percent=10)]
	assert [p.pid for p in search(procs, "FIRE")] == [3, 2]
	assert [p.pid for p in search(procs, "")] == [3, 1, 2]
	assert [p.pid for p in sort_processes(procs, "cpu")] == [1, 2, 3]
	assert [p.pid for p in sort_processes(procs, "cpu", reverse=True)] == [3, 2, 1]
	assert [p.pid for p in sort_processes(procs, "mem")] == [3, 2, 1]
	assert [p.pid for p in sort_processes(procs, "memory")] == [3, 2, 1]
	assert [p.pid for p in sort_processes(procs, "pid")] == [1, 2, 3]
	assert [p.name for p in sort_processes(procs, "name")] == ["Firefox", "bash", "fire-tool"]
	assert [p.pid for p in sort_processes(procs, "bogus")] == [1, 2, 3]

def test_ProcCollector_collect():
	snap = snapshot.from_dict({
		"cpuInfo" : { "coreCount" : 1 },
		"memory" : { "total" : 1024 * 1024 },
		"processes" : [
			{ "pid" : 10, "name" : "worker", "cpuTime" : 300, "memoryKb" : 512, "state" : "R" },
			{ "pid" : 11, "name" : "idle", "cpuTime" : 100, "state" : "S" },
			{ "pid" : 2, "name" : "[kthreadd]", "cpuTime" : 900 },
			{ "pid" : 3, "name" : "kernel" },
		] })
	prev = { "processes" : [{ "pid" : 10, "cpuTime" : 100 }, { "pid" : 11, "cpuTime" : 100 }] }
	metrics = ProcCollector.collect(snap, prev, 2)
	assert [p.pid for p in metrics.processes] == [10, 11]
	assert metrics.processes[0].cpu_percent == 100
	assert metrics.processes[0].mem_percent == 50
	assert metrics.count == 2 and metrics.running == 1 and metrics.sleeping == 1
	assert metrics.state_data["processes"][0] == { "pid" : 10, "cpuTime" : 300 }
	assert len(metrics.state_data["processes"]) == 4

def test_ProcCollector_filter():
	snap = snapshot.from_dict({ "processes" : [{ "pid" : 1, "name" : "bash" }, { "pid" : 2, "name" : "python3" }] })
	metrics = ProcCollector.collect(snap, {}, process_filter="PY", sort_key="memory")
	assert [p.name for p in metrics.processes] == ["python3"]
	assert metrics.filtered and metrics.sort_key == "mem"

def test_format_process():
	line = format_process(ProcStat(42, "averyveryverylongprocessname", "someverylonguser", cpu_percent=12.5, mem_percent=3), 10)
	assert line == "     42 somever…  12.5     3  averyvery…"
	assert format_header() == "    PID USER      CPU%  MEM%  NAME"

def test_TempCollector_collect():
	snap = snapshot.from_dict({ "temperature" : { "thermal" : [{ "name" : "gpu", "type" : "amdgpu", "temp" : 60 }, { "name" : "Package", "type" : "x86_pkg_temp", "temp" : 48 }] } })
	metrics = TempCollector.collect(snap, {})
	assert metrics.available
	assert metrics.cpu_temp == 48
	assert metrics.formatted == "48°C"
	assert metrics.max_temp == 60 and metrics.avg_temp == 54
	assert metrics.status == "cool"

def test_TempCollector_unavailable():
	metrics = TempCollector.collect(PlatformSnapshot(), {})
	assert not metrics.available
	assert metrics.formatted == "N/A"

def test_cpu_sensor_temp():
	assert cpu_sensor_temp([Sensor("a", "acpi", 30), Sensor("b", "nvme", 70)]) == 70
	assert cpu_sensor_temp([Sensor("Core 0", "Core", 40), Sensor("b", "nvme", 70)]) == 40
	assert cpu_sensor_temp([]) == 0

def test_temp_status():
	assert [temp_status(t) for t in (20, 50, 70, 85, 95)] == ["cool", "normal", "warm", "hot", "critical"]

def test_BatteryCollector_collect():
	snap = snapshot.from_dict({ "battery" : { "present" : True, "battery" : { "capacity" : 55.5, "charging" : True } } })
	metrics = BatteryCollector.collect(snap, {})
	assert metrics.present
	assert metrics.summary == "⚡ 55% (Charging)"
	assert metrics.level == "good"
	assert not metrics.is_low
	assert metrics.state_data == { "batteryHistory" : [55.5] }

def test_BatteryCollector_absent():
	metrics = BatteryCollector.collect(PlatformSnapshot(), {})
	assert not metrics.present
	assert metrics.summary == "No battery"
	assert metrics.state_data == { "batteryHistory" : [] }

def test_BatteryCollector_absent_keeps_history():
	metrics = BatteryCollector.collect(PlatformSnapshot(), { "batteryHistory" : [80, 79.5] })
	assert not metrics.present
	assert metrics.state_data == { "batteryHistory" : [80, 79.5] }

def test_battery_level():
	assert [battery_level(p) for p in (95, 60, 30, 15, 5)] == ["full", "good", "low", "critical", "empty"]
