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

from math import floor
from typing import List, Dict, Tuple

from termon.ansi import Color
from termon.fmt import Number, min_max
from termon.log import errlog

#? Themes ------------------------------------------------------------------------------------->

DEFAULT_THEME: Dict[str, str] = {
	"name" : "Default",
	"background" : "#282a36",
	"foreground" : "#f8f8f2",
	"border" : "#6272a4",
	"title" : "#bd93f9",
	"highlight" : "#50fa7b",
	"cpu" : "#ff79c6",
	"memory" : "#8be9fd",
	"network" : "#50fa7b",
	"disk" : "#ffb86c",
	"process" : "#f8f8f2",
	"temp" : "#ff5555",
	"battery" : "#50fa7b",
	"graph" : "#bd93f9",
	"graph_fill" : "#44475a",
	"low" : "#50fa7b",
	"medium" : "#f1fa8c",
	"high" : "#ffb86c",
	"critical" : "#ff5555",
	"header_bg" : "#44475a",
	"header_fg" : "#f8f8f2",
	"selected" : "#44475a"
}

THEMES: Dict[str, Dict[str, str]] = {
	"default" : DEFAULT_THEME,
	"nord" : {
		"name" : "Nord",
		"background" : "#2e3440", "foreground" : "#eceff4", "border" : "#4c566a", "title" : "#88c0d0", "highlight" : "#a3be8c",
		"cpu" : "#bf616a", "memory" : "#5e81ac", "network" : "#a3be8c", "disk" : "#ebcb8b", "process" : "#eceff4",
		"temp" : "#bf616a", "battery" : "#a3be8c", "graph" : "#81a1c1", "graph_fill" : "#3b4252",
		"low" : "#a3be8c", "medium" : "#ebcb8b", "high" : "#d08770", "critical" : "#bf616a",
		"header_bg" : "#3b4252", "header_fg" : "#eceff4", "selected" : "#4c566a"
	},
	"monokai" : {
		"name" : "Monokai",
		"background" : "#272822", "foreground" : "#f8f8f2", "border" : "#75715e", "title" : "#ae81ff", "highlight" : "#a6e22e",
		"cpu" : "#f92672", "memory" : "#66d9ef", "network" : "#a6e22e", "disk" : "#fd971f", "process" : "#f8f8f2",
		"temp" : "#f92672", "battery" : "#a6e22e", "graph" : "#ae81ff", "graph_fill" : "#3e3d32",
		"low" : "#a6e22e", "medium" : "#e6db74", "high" : "#fd971f", "critical" : "#f92672",
		"header_bg" : "#3e3d32", "header_fg" : "#f8f8f2", "selected" : "#49483e"
	},
	"gruvbox" : {
		"name" : "Gruvbox",
		"background" : "#282828", "foreground" : "#ebdbb2", "border" : "#665c54", "title" : "#d3869b", "highlight" : "#b8bb26",
		"cpu" : "#fb4934", "memory" : "#83a598", "network" : "#b8bb26", "disk" : "#fe8019", "process" : "#ebdbb2",
		"temp" : "#fb4934", "battery" : "#b8bb26", "graph" : "#d3869b", "graph_fill" : "#3c3836",
		"low" : "#b8bb26", "medium" : "#fabd2f", "high" : "#fe8019", "critical" : "#fb4934",
		"header_bg" : "#3c3836", "header_fg" : "#ebdbb2", "selected" : "#504945"
	},
	"solarized" : {
		"name" : "Solarized",
		"background" : "#002b36", "foreground" : "#839496", "border" : "#586e75", "title" : "#268bd2", "highlight" : "#859900",
		"cpu" : "#dc322f", "memory" : "#268bd2", "network" : "#859900", "disk" : "#cb4b16", "process" : "#839496",
		"temp" : "#dc322f", "battery" : "#859900", "graph" : "#6c71c4", "graph_fill" : "#073642",
		"low" : "#859900", "medium" : "#b58900", "high" : "#cb4b16", "critical" : "#dc322f",
		"header_bg" : "#073642", "header_fg" : "#93a1a1", "selected" : "#073642"
	},
	"onedark" : {
		"name" : "One Dark",
		"background" : "#282c34", "foreground" : "#abb2bf", "border" : "#4b5263", "title" : "#c678dd", "highlight" : "#98c379",
		"cpu" : "#e06c75", "memory" : "#61afef", "network" : "#98c379", "disk" : "#d19a66", "process" : "#abb2bf",
		"temp" : "#e06c75", "battery" : "#98c379", "graph" : "#c678dd", "graph_fill" : "#3e4451",
		"low" : "#98c379", "medium" : "#e5c07b", "high" : "#d19a66", "critical" : "#e06c75",
		"header_bg" : "#3e4451", "header_fg" : "#abb2bf", "selected" : "#3e4451"
	},
	"tokyonight" : {
		"name" : "Tokyo Night",
		"background" : "#1a1b26", "foreground" : "#c0caf5", "border" : "#414868", "title" : "#bb9af7", "highlight" : "#9ece6a",
		"cpu" : "#f7768e", "memory" : "#7aa2f7", "network" : "#9ece6a", "disk" : "#ff9e64", "process" : "#c0caf5",
		"temp" : "#f7768e", "battery" : "#9ece6a", "graph" : "#bb9af7", "graph_fill" : "#24283b",
		"low" : "#9ece6a", "medium" : "#e0af68", "high" : "#ff9e64", "critical" : "#f7768e",
		"header_bg" : "#24283b", "header_fg" : "#c0caf5", "selected" : "#33467c"
	},
	"catppuccin" : {
		"name" : "Catppuccin",
		"background" : "#1e1e2e", "foreground" : "#cdd6f4", "border" : "#585b70", "title" : "#cba6f7", "highlight" : "#a6e3a1",
		"cpu" : "#f38ba8", "memory" : "#89b4fa", "network" : "#a6e3a1", "disk" : "#fab387", "process" : "#cdd6f4",
		"temp" : "#f38ba8", "battery" : "#a6e3a1", "graph" : "#cba6f7", "graph_fill" : "#313244",
		"low" : "#a6e3a1", "medium" : "#f9e2af", "high" : "#fab387", "critical" : "#f38ba8",
		"header_bg" : "#313244", "header_fg" : "#cdd6f4", "selected" : "#45475a"
	},
	"matrix" : {
		"name" : "Matrix",
		"background" : "#000000", "foreground" : "#00ff00", "border" : "#003300", "title" : "#00ff00", "highlight" : "#00ff00",
		"cpu" : "#00ff00", "memory" : "#00dd00", "network" : "#00ff00", "disk" : "#00bb00", "process" : "#00ff00",
		"temp" : "#00ff00", "battery" : "#00ff00", "graph" : "#00ff00", "graph_fill" : "#001100",
		"low" : "#00ff00", "medium" : "#00dd00", "high" : "#00bb00", "critical" : "#ff0000",
		"header_bg" : "#001100", "header_fg" : "#00ff00", "selected" : "#003300"
	},
}

#? Fixed percentage gradients, lowest value first
GRADIENTS: Dict[str, Tuple[str, ...]] = {
	"cpu" : ("#50fa7b", "#69ff94", "#98c379", "#b5e853", "#e5c07b", "#f1fa8c", "#ffb86c", "#ff9966", "#ff6666", "#ff5555"),
	"memory" : ("#8be9fd", "#61afef", "#c678dd", "#ff5555"),
	"temp" : ("#61afef", "#56b6c2", "#98c379", "#e5c07b", "#ffb86c", "#ff5555"),
	"disk" : ("#50fa7b", "#e5c07b", "#ffb86c", "#ff5555"),
	"battery" : ("#ff5555", "#ffb86c", "#e5c07b", "#98c379", "#50fa7b"),
}

NET_COLORS: Dict[str, str] = {
	"download" : "#50fa7b",
	"upload" : "#ff79c6",
	"idle" : "#6272a4",
}

#* Temperature band mapped onto the temp gradient
TEMP_MIN: int = 30
TEMP_MAX: int = 100

class Theme:
	'''Named color set, every role from DEFAULT_THEME is always set.
	__init__(name) loads the named theme, unknown names load the default theme
	* .gradient[name] : List[Color] for "cpu", "memory", "temp", "disk" and "battery"
	'''
	key: str
	name: str
	background = foreground = border = title = highlight = cpu = memory = network = disk = process = temp = battery = graph = graph_fill = low = medium = high = critical = header_bg = header_fg = selected = Color("")
	gradient: Dict[str, List[Color]]

	def __init__(self, name: str = "default"):
		tdict: Dict[str, str]
		key = name.lower() if name else "default"
		if key in THEMES:
			tdict = THEMES[key]
		else:
			errlog.warning(f'No theme named "{name}" found!')
			key = "default"
			tdict = DEFAULT_THEME
		self.key = key
		self.name = tdict.get("name", key)

		#* Get key names from DEFAULT_THEME dict to not leave any color unset if missing from theme dict
		for item, value in DEFAULT_THEME.items():
			if item == "name": continue
			setattr(self, item, Color(tdict.get(item, value)))

		self.gradient = { gname : [Color(c) for c in colors] for gname, colors in GRADIENTS.items() }

	def __getitem__(self, role: str) -> Color:
		return getattr(self, role)

	def roles(self) -> List[str]:
		return [item for item in DEFAULT_THEME if item != "name"]

_cache: Dict[str, Theme] = {}

def get_theme(name: str) -> Theme:
	'''Cached Theme lookup, unknown names give the default theme'''
	key = name.lower() if name else "default"
	if key not in THEMES:
		errlog.warning(f'No theme named "{name}" found!')
		key = "default"
	if key not in _cache:
		_cache[key] = Theme(key)
	return _cache[key]

def theme_names() -> List[str]:
	return sorted(THEMES)

#? Gradient lookups ----------------------------------------------------------------------------->

def gradient_color(gradient: List[Color], pct: Number) -> Color:
	'''Pick the gradient step for a 0-100 percentage, out of range values are clamped'''
	if not gradient: return Color("")
	return gradient[floor(min_max(pct, 0, 99) * len(gradient) / 100)]

def temp_color(theme: Theme, celsius: Number) -> Color:
	pct = min_max((celsius - TEMP_MIN) * 100 / (TEMP_MAX - TEMP_MIN), 0, 100)
	return gradient_color(theme.gradient["temp"], pct)

def interpolate(color1: str, color2: str, pct: Number) -> Tuple[int, int, int]:
	'''RGB between two hex colors, pct 0 gives color1 and 100 gives color2'''
	c1, c2 = Color(color1), Color(color2)
	t: float = min_max(pct, 0, 100) / 100
	return tuple(floor(a + (b - a) * t) for a, b in zip(c1.dec, c2.dec)) #type: ignore

def make_gradient(color1: str, color2: str, steps: int) -> List[Color]:
	out: List[Color] = []
	for i in range(steps):
		pct = 0 if steps <= 1 else i * 100 / (steps - 1)
		out.append(Color(" ".join(str(c) for c in interpolate(color1, color2, pct))))
	return out
