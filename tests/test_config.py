import os

from termon import VERSION
from termon.config import Config, DEFAULT_CONF, _strtobool

def write_conf(path, body: str, version: str = VERSION):
	with open(path, "w") as f:
		f.write(f'#? Config file for termon v. {version}\n{body}')

def test_Config_defaults(tmp_path):
	config = Config(str(tmp_path / "termon.conf"), environ={})
	assert config.color_theme == "default"
	assert config.update_ms == 2000
	assert config.proc_sorting == "cpu"
	assert config.recreate
	assert config.info

def test_Config_load(tmp_path):
	path = tmp_path / "termon.conf"
	write_conf(path, 'color_theme="nord"\nupdate_ms=1000\nproc_reversed=True\ndisks_filter="exclude=/boot"\nunknown_key=1\n')
	config = Config(str(path), environ={})
	assert config.color_theme == "nord"
	assert config.update_ms == 1000
	assert config.proc_reversed is True
	assert config.disks_filter == "exclude=/boot"
	assert not config.warnings

def test_Config_bad_values(tmp_path):
	path = tmp_path / "termon.conf"
	write_conf(path, 'update_ms=50\nproc_sorting="bogus"\nproc_reversed=maybe\ncheck_temp=1\nlog_level="LOUD"\ncolor_theme="nope"\nborder_style="dotted"\n')
	config = Config(str(path), environ={})
	assert config.update_ms == 100
	assert config.proc_sorting == "cpu"
	assert config.proc_reversed is False
	assert config.check_temp is True
	assert config.log_level == "WARNING"
	assert config.color_theme == "default"
	assert config.border_style == "rounded"
	assert len(config.warnings) == 6
	assert 'Config key "proc_reversed" can only be True or False!' in config.warnings

def test_Config_env_override(tmp_path):
	config = Config(str(tmp_path / "termon.conf"), environ={ "TERMON_THEME" : "matrix", "TERMON_REFRESH" : "0.5" })
	assert config.color_theme == "matrix"
	assert config.update_ms == 500
	assert config.conf_dict["color_theme"] == "default"
	bad = Config(str(tmp_path / "termon.conf"), environ={ "TERMON_REFRESH" : "soon" })
	assert bad.update_ms == 2000
	assert bad.warnings

def test_Config_save(tmp_path):
	path = str(tmp_path / "sub" / "termon.conf")
	config = Config(path, environ={})
	config.color_theme = "gruvbox"
	assert config.changed
	config.save_config()
	assert os.path.isfile(path)
	with open(path) as f:
		text = f.read()
	assert text.startswith(f'#? Config file for termon v. {VERSION}')
	assert 'color_theme="gruvbox"' in text
	reloaded = Config(path, environ={})
	assert reloaded.color_theme == "gruvbox"
	assert not reloaded.recreate

def test_Config_version_mismatch(tmp_path):
	path = tmp_path / "termon.conf"
	write_conf(path, 'color_theme="nord"\n', version="0.0.1")
	config = Config(str(path), environ={})
	assert config.recreate
	assert config.color_theme == "nord"

def test_DEFAULT_CONF_keys():
	values = { key : getattr(Config, key) for key in Config.keys }
	text = DEFAULT_CONF.substitute(values)
	for key in Config.keys:
		assert f'{key}=' in text

def test_strtobool():
	assert _strtobool("True") and _strtobool("yes") and _strtobool("1")
	assert not _strtobool("False") and not _strtobool("off")
