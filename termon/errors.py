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

class TermonError(Exception):
	'''Base class for all termon errors'''

class SnapshotError(TermonError, ValueError):
	'''A single snapshot entry failed validation, the entry is dropped by the caller'''

class StateError(TermonError, ValueError):
	'''Persisted state blob could not be decoded, callers fall back to a cold start'''

class ConfigError(TermonError, ValueError):
	'''Config value could not be used'''
