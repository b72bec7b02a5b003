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

from math import floor, isfinite
from typing import Tuple, Union

from termon.ansi import visual_length, truncate

Number = Union[int, float]

#? Units for format_bytes function
UNITS: Tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")

def min_max(value: Number, min_value: Number = 0, max_value: Number = 100) -> Number:
	return max(min_value, min(value, max_value))

def round_half(value: Number, decimals: int = 1) -> float:
	'''Round half away from zero for positive values, floor(value * 10^n + 0.5) / 10^n'''
	factor: int = 10 ** decimals
	scaled: float = value * factor + 0.5
	if not isfinite(scaled): return float(value) if isfinite(value) else 0.0
	return floor(scaled) / factor

def decimal(value: Number) -> str:
	'''Integers are shown as is, floats with one decimal, nan and inf as 0.0'''
	if isinstance(value, int): return f'{value}'
	if not isfinite(value): value = 0.0
	return f'{round_half(value, 1):.1f}'

def percentage(part: Number, total: Number) -> Number:
	if total == 0: return 0
	return part * 100 / total

def format_bytes(value: Number) -> str:
	'''Scales up in steps of 1024 to highest possible unit and returns string with unit suffixed
	* integer values below 1024 are shown without decimals, everything else with one decimal
	'''
	selector: int = 0
	if isinstance(value, float) and not isfinite(value) or value < 0: value = 0
	while value >= 1024 and selector < len(UNITS) - 1:
		value /= 1024
		selector += 1
	return f'{decimal(value)} {UNITS[selector]}'

def format_bytes_per_sec(value: Number) -> str:
	return f'{format_bytes(value)}/s'

def format_percent(value: Number) -> str:
	return f'{decimal(value)}%'

def format_number(value: Number) -> str:
	'''Whole part with thousands separator'''
	return f'{floor(value):,}'

def format_temp(celsius: Number) -> str:
	return f'{decimal(celsius)}°C'

def format_uptime(seconds: Number) -> str:
	if seconds < 0: seconds = 0
	days: int = floor(seconds / 86400)
	hours: int = floor((seconds - days * 86400) / 3600)
	minutes: int = floor((seconds - days * 86400 - hours * 3600) / 60)
	return f'{days}d {hours}h {minutes}m'

def format_frequency(mhz: Number) -> str:
	if mhz > 1000: return f'{round_half(mhz / 1000, 1):.1f} GHz'
	if mhz > 0: return f'{floor(mhz)} MHz'
	return ""

#? Fixed width helpers, all measure visual width so embedded escapes never shift columns

def pad_right(string: str, width: int, fill: str = " ") -> str:
	return string + fill * max(width - visual_length(string), 0)

def pad_left(string: str, width: int, fill: str = " ") -> str:
	return fill * max(width - visual_length(string), 0) + string

def center(string: str, width: int) -> str:
	space: int = max(width - visual_length(string), 0)
	left: int = space // 2
	return " " * left + string + " " * (space - left)

def fit(string: str, width: int) -> str:
	'''Truncate then pad to exactly width columns'''
	return pad_right(truncate(string, width), width)
