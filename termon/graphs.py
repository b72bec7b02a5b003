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
from typing import List, Tuple, Optional, Sequence

from termon.ansi import Color
from termon.fmt import Number, min_max, pad_left
from termon.theme import gradient_color

class Symbol:
	fill: str = "█"
	empty: str = "░"
	up: str = "↑"
	down: str = "↓"
	#* Sparkline levels, index 0 is empty and the last index full
	vertical: Tuple[str, ...] = (" ", "▁", "▂", "▃", "▄", "▅", "▆", "▇", "█")
	braille: Tuple[str, ...] = (" ", "⡀", "⡄", "⡆", "⡇", "⣇", "⣧", "⣷", "⣿")
	blocks: Tuple[str, ...] = (" ", "▏", "▎", "▍", "▌", "▋", "▊", "▉", "█")

def sparkline(values: Sequence[Number], width: int = 20, max_value: Optional[Number] = None, chars: Tuple[str, ...] = Symbol.vertical) -> str:
	'''Single row graph exactly width characters wide.
	Longer series are sampled at even steps, shorter ones are left padded with zeros.
	Without max_value the series maximum is used, an all zero series scales against 1.
	'''
	if width <= 0: return ""
	safe: List[Number] = list(values) if values else [0]
	top: Number = max_value if max_value else (max(safe) or 1)
	levels: int = len(chars) - 1
	if len(safe) >= width:
		step: float = len(safe) / width
		sampled = [safe[floor(i * step)] for i in range(width)]
	else:
		sampled = [0] * (width - len(safe)) + safe
	return "".join(chars[min_max(floor(min_max(v, 0, top) * levels / top), 0, levels)] for v in sampled)

def _pct_text(pct: Number, show_pct: bool) -> str:
	return f' {pad_left(str(floor(pct)), 3)}%' if show_pct else ""

def horizontal_bar(pct: Number, width: int = 20, show_pct: bool = True, fill_color: Optional[Color] = None, empty_color: Optional[Color] = None) -> str:
	pct_text = _pct_text(pct, show_pct)
	bar_width: int = max(width - len(pct_text), 0)
	filled: int = floor(min_max(pct) * bar_width / 100)
	out_fill = Symbol.fill * filled
	out_empty = Symbol.empty * (bar_width - filled)
	if fill_color is not None: out_fill = fill_color(out_fill)
	if empty_color is not None: out_empty = empty_color(out_empty)
	return f'{out_fill}{out_empty}{pct_text}'

def smooth_bar(pct: Number, width: int = 20, show_pct: bool = True) -> str:
	'''Bar with eighth of a character precision'''
	pct_text = _pct_text(pct, show_pct)
	bar_width: int = max(width - len(pct_text), 0)
	units: int = floor(min_max(pct) * bar_width * 8 / 100)
	full, partial = divmod(units, 8)
	out: str = Symbol.fill * full + (Symbol.blocks[partial] if partial else "")
	return out + " " * (bar_width - full - (1 if partial else 0)) + pct_text

def percentage_bar(pct: Number, width: int = 20, gradient: Sequence[Color] = (), show_pct: bool = True) -> str:
	'''Bar with the filled part colored by the gradient step for pct'''
	return horizontal_bar(pct, width, show_pct, fill_color=gradient_color(list(gradient), pct) if gradient else None)

def dual_bar(value1: Number, value2: Number, max_value: Number, width: int = 20, color1: Optional[Color] = None, color2: Optional[Color] = None) -> str:
	'''Two values against a shared maximum, second bar drawn after the first'''
	safe_max: Number = max_value if max_value != 0 else 1
	width1: int = floor(min_max(value1 * 100 / safe_max) * width / 100)
	width2: int = min(floor(min_max(value2 * 100 / safe_max) * width / 100), width - width1)
	bar1, bar2 = Symbol.fill * width1, Symbol.fill * width2
	if color1 is not None: bar1 = color1(bar1)
	if color2 is not None: bar2 = color2(bar2)
	return f'{bar1}{bar2}{Symbol.empty * (width - width1 - width2)}'
