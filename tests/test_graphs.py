from termon.ansi import Color, strip, visual_length
from termon.graphs import Symbol, sparkline, horizontal_bar, smooth_bar, percentage_bar, dual_bar
from termon.theme import Theme

def test_sparkline():
	assert sparkline([], 5) == "     "
	assert sparkline([0, 0, 0], 3) == "   "
	assert sparkline([0, 8], 2, max_value=8) == " █"
	assert sparkline(range(10), 5) == " ▁▃▅▇"
	assert sparkline([1, 2, 3], 0) == ""

def test_sparkline_width():
	for values in ([], [5], list(range(200))):
		assert len(sparkline(values, 20)) == 20

def test_horizontal_bar():
	assert horizontal_bar(50, 10, show_pct=False) == "█████░░░░░"
	assert horizontal_bar(50, 15) == "█████░░░░░  50%"
	assert horizontal_bar(150, 4, show_pct=False) == "████"
	assert horizontal_bar(-5, 4, show_pct=False) == "░░░░"

def test_horizontal_bar_colored():
	bar = horizontal_bar(50, 10, show_pct=False, fill_color=Color("#ff0000"))
	assert strip(bar) == "█████░░░░░"
	assert bar.startswith(Color("#ff0000").escape)

def test_smooth_bar():
	bar = smooth_bar(55, 10, show_pct=False)
	assert bar == "█████" + Symbol.blocks[4] + "    "
	assert len(smooth_bar(100, 10, show_pct=False)) == 10

def test_percentage_bar():
	gradient = Theme().gradient["cpu"]
	bar = percentage_bar(90, 20, gradient)
	assert visual_length(bar) == 20
	assert gradient[-1].escape in bar
	assert percentage_bar(10, 10, show_pct=False) == "█░░░░░░░░░"

def test_dual_bar():
	assert dual_bar(25, 25, 100, 8) == "████░░░░"
	assert dual_bar(80, 80, 100, 10) == "██████████"
	assert dual_bar(1, 1, 0, 4) == "████"
