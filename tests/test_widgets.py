from more_itertools import first

from termon.ansi import Fx, strip, visual_length
from termon.collect import CpuMetrics, CpuUsage, MemMetrics, NetMetrics, DiskMetrics, ProcMetrics, ProcStat, TempMetrics, BatteryMetrics, mount_usage
from termon.snapshot import Mount, LoadAverage
from termon.theme import get_theme
from termon.widgets import CpuBox, MemBox, NetBox, DiskBox, ProcBox, InfoBar, Header, HelpOverlay, DetailOverlay, Compact, center_overlay

THEME = get_theme("default")

def test_CpuBox_draw():
	metrics = CpuMetrics(overall=50, cores=tuple(CpuUsage(f'cpu{i}', pct=i * 10) for i in range(8)), history=[10, 20], frequency="2.4 GHz")
	lines = CpuBox.draw(metrics, 48, THEME, 8)
	assert len(lines) == 8
	for line in lines:
		assert visual_length(line) == 48
	assert "CPU" in strip(lines[0])
	assert "50% @ 2.4 GHz" in strip(lines[1])
	assert strip(lines[2]).startswith("│Core  0 ")
	assert "Core  1 " in strip(lines[2])

def test_MemBox_draw():
	lines = MemBox.draw(MemMetrics(), 32, THEME, 8)
	assert len(lines) == 8
	for line in lines:
		assert visual_length(line) == 32
	assert "Swap" in strip(lines[-3])
	assert "No swap" in strip(lines[-2])

def test_NetBox_draw():
	lines = NetBox.draw(NetMetrics(), 48, THEME, 5)
	assert len(lines) == 5
	for line in lines:
		assert visual_length(line) == 48
	assert strip(lines[1]).startswith("│none   ↓      0 B/s")

def test_DiskBox_empty():
	lines = DiskBox.draw(DiskMetrics(), 40, THEME)
	assert len(lines) == 3
	assert strip(lines[1]) == f'│{"IO  r 0 B/s  w 0 B/s":<38}│'

def test_DiskBox_limits_mounts():
	mounts = tuple(mount_usage(Mount(mount_point=f'/m{i}', total=100, used=50)) for i in range(6))
	assert len(DiskBox.draw(DiskMetrics(mounts=mounts), 40, THEME)) == 4 + 3
	lines = DiskBox.draw(DiskMetrics(mounts=mounts), 40, THEME, 5)
	assert len(lines) == 5
	assert strip(lines[1]).startswith("│/m0 ")
	assert "IO  r" in strip(lines[3])
	for line in lines:
		assert visual_length(line) == 40

def test_ProcBox_draw():
	procs = ProcMetrics(processes=(ProcStat(1, "a"), ProcStat(2, "b"), ProcStat(3, "c")), count=3)
	lines = ProcBox.draw(procs, 60, 10, THEME, scroll=0, selected=1)
	assert len(lines) == 10
	for line in lines:
		assert visual_length(line) == 60
	assert "Processes [cpu] 2/3" in strip(lines[0])
	assert "PID USER" in strip(lines[1])
	assert Fx.reverse in lines[4]
	assert strip(lines[4]).startswith("│      2 ")
	assert Fx.reverse not in lines[3]

def test_ProcBox_title():
	procs = ProcMetrics(sort_key="mem", sort_reversed=True)
	assert ProcBox.make_title(procs, 0, 0, "fire") == "Processes [mem rev] filter: fire"

def test_ProcBox_long_filter():
	procs = ProcMetrics(processes=(ProcStat(1, "a"),), count=1)
	lines = ProcBox.draw(procs, 40, 8, THEME, process_filter="y" * 60)
	for line in lines:
		assert visual_length(line) == 40
	assert strip(lines[0]).endswith("… ─╮")

def test_ProcBox_viewport_rows():
	assert ProcBox.viewport_rows(10) == 6
	assert ProcBox.viewport_rows(2) == 0

def test_InfoBar_draw():
	assert strip(InfoBar.draw(TempMetrics(), BatteryMetrics(), THEME)) == "CPU: N/A"
	bar = InfoBar.draw(TempMetrics(available=True, cpu_temp=50, formatted="50°C"), BatteryMetrics(present=True, summary="🔋 80% (Full)"),
		THEME, LoadAverage(1, 0.5, 0.25))
	assert strip(bar) == "CPU: 50°C  │  🔋 80% (Full)  │  Load: 1.00 0.50 0.25"

def test_Header_draw():
	header = Header.draw(80, THEME, 90061)
	assert visual_length(header) == 80
	assert strip(header).startswith("termon")
	assert strip(header).endswith("up 1d 1h 1m")
	assert visual_length(Header.draw(40, THEME)) == 40

def test_center_overlay():
	assert center_overlay(["abc"], 11, 5) == [" " * 11, " " * 11, "    abc"]
	assert center_overlay(["abcdef"], 4, 1) == ["abcdef"]

def test_HelpOverlay_draw():
	lines = HelpOverlay.draw(80, 24, THEME)
	assert len(lines) == 5 + len(HelpOverlay.keys) + 2
	assert "Help" in strip(lines[5])
	assert any("Quit" in strip(line) for line in lines)
	assert visual_length(lines[5]) == 15 + 50

def test_DetailOverlay_draw():
	proc = ProcStat(7, "vim", "me", state="S", cpu_percent=1.5, mem_percent=2, memory_kb=2048, command="vim notes.txt")
	lines = [strip(line) for line in DetailOverlay.draw(proc, 80, 24, THEME)]
	assert "Process 7" in first(line for line in lines if line.strip())
	assert any("2.0 MB (2%)" in line for line in lines)
	assert any("vim notes.txt" in line for line in lines)

def test_Compact_draw():
	lines = Compact.draw(CpuMetrics(overall=50), MemMetrics(used_percent=25), NetMetrics(), 80, THEME)
	assert len(lines) == 2
	assert strip(lines[0]).startswith("CPU ")
	assert "  MEM " in strip(lines[0])
	assert strip(lines[1]) == "NET ↓     0 B/s ↑     0 B/s"
