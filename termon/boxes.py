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

'''Bordered panels and panel composition.

All functions work on lists of lines and return new lists, widths are always visual widths
so lines may carry escape sequences.
'''

from typing import List, Dict, Tuple, Optional, Sequence, NamedTuple

from termon.ansi import Color, visual_length
from termon.fmt import pad_right, fit

class BoxStyle(NamedTuple):
	h_line: str
	v_line: str
	left_up: str
	right_up: str
	left_down: str
	right_down: str
	left_t: str
	right_t: str
	top_t: str
	bottom_t: str
	cross: str

SINGLE = BoxStyle("─", "│", "┌", "┐", "└", "┘", "├", "┤", "┬", "┴", "┼")
DOUBLE = BoxStyle("═", "║", "╔", "╗", "╚", "╝", "╠", "╣", "╦", "╩", "╬")
ROUNDED = BoxStyle("─", "│", "╭", "╮", "╰", "╯", "├", "┤", "┬", "┴", "┼")
HEAVY = BoxStyle("━", "┃", "┏", "┓", "┗", "┛", "┣", "┫", "┳", "┻", "╋")

STYLES: Dict[str, BoxStyle] = { "single" : SINGLE, "double" : DOUBLE, "rounded" : ROUNDED, "heavy" : HEAVY }

def get_style(name: str) -> BoxStyle:
	return STYLES.get(name, SINGLE)

def _paint(color: Optional[Color], text: str) -> str:
	return color(text) if color is not None and text else text

def _title_run(inner_width: int, title: Optional[str], style: BoxStyle, title_color: Optional[Color], border_color: Optional[Color]) -> str:
	'''Horizontal run of inner_width columns with " title " inserted after the first glyph'''
	if not title:
		return _paint(border_color, style.h_line * inner_width)
	title_str: str = f' {title} '
	right_pad: int = max(inner_width - visual_length(title_str) - 1, 0)
	return f'{_paint(border_color, style.h_line)}{_paint(title_color, title_str)}{_paint(border_color, style.h_line * right_pad)}'

def _content_line(line: str, inner_width: int, style: BoxStyle, border_color: Optional[Color]) -> str:
	v_line = _paint(border_color, style.v_line)
	return f'{v_line}{pad_right(line, inner_width)}{v_line}'

def box(content: Sequence[str], width: int, title: Optional[str] = None, style: BoxStyle = SINGLE,
	title_color: Optional[Color] = None, border_color: Optional[Color] = None) -> List[str]:
	'''Wrap content lines in a border, every line padded to width - 2 visual columns.
	Lines already wider than that are left as they are.'''
	inner_width: int = max(width - 2, 0)
	out: List[str] = [f'{_paint(border_color, style.left_up)}{_title_run(inner_width, title, style, title_color, border_color)}{_paint(border_color, style.right_up)}']
	out += [_content_line(line, inner_width, style, border_color) for line in content]
	out.append(_paint(border_color, f'{style.left_down}{style.h_line * inner_width}{style.right_down}'))
	return out

def box_border(width: int, height: int, title: Optional[str] = None, style: BoxStyle = SINGLE,
	title_color: Optional[Color] = None, border_color: Optional[Color] = None) -> List[str]:
	'''Empty box of the given outer size'''
	return box([""] * max(height - 2, 0), width, title, style, title_color, border_color)

def box_with_subsection(main_content: Sequence[str], sub_content: Sequence[str], width: int, main_title: Optional[str] = None,
	sub_title: Optional[str] = None, style: BoxStyle = SINGLE, title_color: Optional[Color] = None, border_color: Optional[Color] = None) -> List[str]:
	'''One border around two blocks separated by a titled divider line'''
	inner_width: int = max(width - 2, 0)
	out: List[str] = [f'{_paint(border_color, style.left_up)}{_title_run(inner_width, main_title, style, title_color, border_color)}{_paint(border_color, style.right_up)}']
	out += [_content_line(line, inner_width, style, border_color) for line in main_content]
	out.append(f'{_paint(border_color, style.left_t)}{_title_run(inner_width, sub_title, style, title_color, border_color)}{_paint(border_color, style.right_t)}')
	out += [_content_line(line, inner_width, style, border_color) for line in sub_content]
	out.append(_paint(border_color, f'{style.left_down}{style.h_line * inner_width}{style.right_down}'))
	return out

def panel(content: Sequence[str], width: int, title: Optional[str] = None, padding: int = 1, style: BoxStyle = SINGLE,
	title_color: Optional[Color] = None, border_color: Optional[Color] = None) -> List[str]:
	'''Box with blank padding around content, content lines are truncated to fit'''
	inner_width: int = max(width - 2 - padding * 2, 0)
	h_pad: str = " " * padding
	v_pad: List[str] = [" " * (inner_width + padding * 2)] * padding
	lines = v_pad + [f'{h_pad}{fit(line, inner_width)}{h_pad}' for line in content] + v_pad
	return box(lines, width, title, style, title_color, border_color)

def split_horizontal(left: Sequence[str], right: Sequence[str], left_width: int, right_width: int, gap: int = 0) -> List[str]:
	'''Zip two panels side by side, the shorter one continues with blank lines'''
	height: int = max(len(left), len(right))
	gap_str: str = " " * gap
	out: List[str] = []
	for i in range(height):
		left_line = left[i] if i < len(left) else ""
		right_line = right[i] if i < len(right) else ""
		out.append(f'{pad_right(left_line, left_width)}{gap_str}{pad_right(right_line, right_width)}')
	return out

def split_vertical(top: Sequence[str], bottom: Sequence[str], gap: int = 0) -> List[str]:
	return list(top) + [""] * gap + list(bottom)

def columns(panels: Sequence[Sequence[str]], widths: Sequence[int], gap: int = 1) -> List[str]:
	'''Any number of panels side by side, each padded to its width'''
	if not panels: return []
	height: int = max(len(p) for p in panels)
	gap_str: str = " " * gap
	return [gap_str.join(pad_right(p[i] if i < len(p) else "", w) for p, w in zip(panels, widths)) for i in range(height)]

def divider(width: int, label: Optional[str] = None, style: BoxStyle = SINGLE, color: Optional[Color] = None) -> str:
	if not label:
		return _paint(color, style.h_line * width)
	label_str: str = f' {label} '
	left_width: int = max((width - visual_length(label_str)) // 2, 0)
	right_width: int = max(width - visual_length(label_str) - left_width, 0)
	return _paint(color, f'{style.h_line * left_width}{label_str}{style.h_line * right_width}')

def table(headers: Sequence[Tuple[str, int]], rows: Sequence[Sequence[object]], style: BoxStyle = SINGLE, header_color: Optional[Color] = None) -> List[str]:
	'''Header, separator and rows, headers are (name, width) pairs and every cell is cut to its width'''
	header_line: str = " ".join(pad_right(name, w) for name, w in headers)
	separator: str = style.top_t.join(style.h_line * w for _, w in headers)
	out: List[str] = [_paint(header_color, header_line), separator]
	for row in rows:
		out.append(" ".join(fit(str(row[i]) if i < len(row) else "", w) for i, (_, w) in enumerate(headers)))
	return out
