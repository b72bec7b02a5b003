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

VERSION: str = "1.0.0"

from termon.render import FrameInput, State, Selection, render, render_compact, export_json, export_csv, theme_names, preview_theme
from termon.snapshot import PlatformSnapshot, from_dict as snapshot_from_dict

__all__ = ["VERSION", "FrameInput", "State", "Selection", "render", "render_compact", "export_json", "export_csv",
	"theme_names", "preview_theme", "PlatformSnapshot", "snapshot_from_dict"]
