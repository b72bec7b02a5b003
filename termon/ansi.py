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

from typing import List, Tuple, Union, Iterator, Iterable, NamedTuple

from termon.log import errlog

ESC: str = "\033"

class Fx:
	"""Text effects
	* uncolor(string: str) : Removes all escape sequences and returns string ."""
	start					= "\033["			#* Escape sequence start
	sep						= ";"				#* Escape sequence separator
	end						= "m"				#* Escape sequence end
	reset = rs				= "\033[0m"			#* Reset foreground/background color and text effects
	bold = b				= "\033[1m"			#* Bold on
	unbold = ub				= "\033[22m"		#* Bold off
	dim = d					= "\033[2m"			#* Dim on
	italic = i				= "\033[3m"			#* Italic on
	underline = u			= "\033[4m"			#* Underline on
	reverse = r				= "\033[7m"			#* Reverse video on
	unreverse = ur			= "\033[27m"		#* Reverse video off
	clear					= "\033[2J"			#* Clear screen
	home					= "\033[H"			#* Cursor to top left

	@staticmethod
	def uncolor(string: str) -> str:
		return strip(string)

class Fg:
	'''Basic 16 color foregrounds'''
	black	= "\033[30m"
	red		= "\033[31m"
	green	= "\033[32m"
	yellow	= "\033[33m"
	blue	= "\033[34m"
	magenta	= "\033[35m"
	cyan	= "\033[36m"
	white	= "\033[37m"
	default	= "\033[39m"

#? Escape sequence tokenizer ------------------------------------------------------------------>

class Text(NamedTuple):
	value: str

class Escape(NamedTuple):
	value: str

Token = Union[Text, Escape]

def tokenize(string: str) -> Iterator[Token]:
	'''Lex a string into Text and Escape tokens.
	An escape starts at ESC and ends at the first ascii letter after it, an unterminated escape runs to the end of the string.
	'''
	pos: int = 0
	length: int = len(string)
	while pos < length:
		if string[pos] == ESC:
			end = pos + 1
			while end < length and not (string[end].isascii() and string[end].isalpha()):
				end += 1
			yield Escape(string[pos:end + 1])
			pos = end + 1
		else:
			end = string.find(ESC, pos)
			if end == -1: end = length
			yield Text(string[pos:end])
			pos = end

def strip(string: str) -> str:
	'''Return string with all escape sequences removed'''
	return "".join(t.value for t in tokenize(string) if isinstance(t, Text))

def visual_length(string: str) -> int:
	'''Number of columns the string occupies on screen'''
	return sum(len(t.value) for t in tokenize(string) if isinstance(t, Text))

def truncate(string: str, max_len: int, ellipsis: str = "…") -> str:
	'''Cut string to at most max_len visible columns, last visible column replaced with ellipsis.
	Escape sequences are kept in place, also the ones after the cut point.'''
	if max_len <= 0: return ""
	if visual_length(string) <= max_len: return string
	if len(ellipsis) > max_len: return ellipsis[:max_len]
	keep: int = max_len - len(ellipsis)
	out: List[str] = []
	cut: bool = False
	for token in tokenize(string):
		if isinstance(token, Escape):
			out.append(token.value)
		elif not cut:
			if len(token.value) < keep:
				out.append(token.value)
				keep -= len(token.value)
			else:
				out.append(token.value[:max(keep, 0)] + ellipsis)
				cut = True
	return "".join(out)

#? Colors ------------------------------------------------------------------------------------->

class Color:
	'''Holds representations for a 24-bit color value
	__init__(color, depth="fg")
	-- color accepts 6 digit hexadecimal: string "#RRGGBB", 2 digit hexadecimal: string "#FF" or decimal RGB "255 255 255" as a string.
	-- depth accepts "fg" or "bg"
	__call__(*args) joins str arguments to a string, applies color and resets after
	__str__ returns escape sequence to set color
	__iter__ returns iteration over red, green and blue in integer values of 0-255.
	* Values:  .hexa: str  |  .dec: Tuple[int, int, int]  |  .red: int  |  .green: int  |  .blue: int  |  .depth: str  |  .escape: str
	'''
	hexa: str; dec: Tuple[int, int, int]; red: int; green: int; blue: int; depth: str; escape: str

	def __init__(self, color: str, depth: str = "fg"):
		self.depth = depth
		self.dec = (-1, -1, -1)
		self.hexa = ""
		self.red = self.green = self.blue = -1
		self.escape = ""
		if not color: return
		try:
			self.dec = hex_to_rgb(color) if color.startswith("#") else self._from_dec(color)
		except ValueError as e:
			errlog.exception(str(e))
			self.dec = (-1, -1, -1)
			return

		self.hexa = f'#{self.dec[0]:02x}{self.dec[1]:02x}{self.dec[2]:02x}'
		self.red, self.green, self.blue = self.dec
		self.escape = escape_color(r=self.red, g=self.green, b=self.blue, depth=self.depth)

	@staticmethod
	def _from_dec(color: str) -> Tuple[int, int, int]:
		c_t = tuple(map(int, color.split()))
		if len(c_t) != 3:
			raise ValueError(f'RGB dec should be "0-255 0-255 0-255"')
		if any(c < 0 or c > 255 for c in c_t):
			raise ValueError(f'RGB values out of range: {color}')
		return c_t #type: ignore

	def __str__(self) -> str:
		return self.escape

	def __repr__(self) -> str:
		return repr(self.escape)

	def __iter__(self) -> Iterable:
		for c in self.dec: yield c

	def __eq__(self, other) -> bool:
		return isinstance(other, Color) and self.dec == other.dec and self.depth == other.depth

	def __hash__(self) -> int:
		return hash((self.dec, self.depth))

	def __call__(self, *args: str) -> str:
		if len(args) < 1: return ""
		if not self.escape: return "".join(args)
		return f'{self.escape}{"".join(args)}{Fx.reset}'

	@classmethod
	def fg(cls, *args) -> str:
		if len(args) > 2: return escape_color(r=args[0], g=args[1], b=args[2], depth="fg")
		return escape_color(hexa=args[0], depth="fg")

	@classmethod
	def bg(cls, *args) -> str:
		if len(args) > 2: return escape_color(r=args[0], g=args[1], b=args[2], depth="bg")
		return escape_color(hexa=args[0], depth="bg")

def hex_to_rgb(hexa: str) -> Tuple[int, int, int]:
	'''Accepts "#RRGGBB" or the greyscale short form "#RR"'''
	if len(hexa) == 3:
		c = int(hexa[1:3], base=16)
		return (c, c, c)
	elif len(hexa) == 7:
		return (int(hexa[1:3], base=16), int(hexa[3:5], base=16), int(hexa[5:7], base=16))
	raise ValueError(f'Incorrectly formatted hexadecimal rgb string: {hexa}')

def escape_color(hexa: str = "", r: int = 0, g: int = 0, b: int = 0, depth: str = "fg") -> str:
	"""Returns escape sequence to set color
	* accepts either 6 digit hexadecimal hexa="#RRGGBB", 2 digit hexadecimal: hexa="#FF"
	* or decimal RGB: r=0-255, g=0-255, b=0-255
	* depth="fg" or "bg"
	"""
	dint: int = 38 if depth == "fg" else 48
	if hexa:
		try:
			r, g, b = hex_to_rgb(hexa)
		except ValueError as e:
			errlog.exception(f'{e}')
			return ""
	return f'\033[{dint};2;{r};{g};{b}m'
