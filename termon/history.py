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

from math import isfinite
from typing import List, Any, Iterable

from termon.fmt import Number

MAX_LEN: int = 60

def push(series: Iterable[Number], value: Number, max_len: int = MAX_LEN) -> List[Number]:
	'''Return a new series with value appended, oldest samples dropped to keep at most max_len'''
	out: List[Number] = list(series)
	out.append(value)
	if max_len <= 0: return []
	if len(out) > max_len:
		del out[:len(out) - max_len]
	return out

def from_state(raw: Any, max_len: int = MAX_LEN) -> List[Number]:
	'''Read a persisted series, non numeric and non finite samples are skipped and the result is cut to max_len'''
	if not isinstance(raw, list): return []
	out = [v for v in raw if isinstance(v, int) and not isinstance(v, bool) or isinstance(v, float) and isfinite(v)]
	return out[-max_len:] if max_len > 0 else []
