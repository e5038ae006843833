import pytest

from tcprobe.bootstrap.config.loader import build_parser, get_configfile
from tcprobe.bootstrap.config.settings import ProbeConfig, RuleSettings
from tcprobe.bootstrap.deps import get_config


@pytest.mark.ut
def test_load_from_yaml(write_config, cli_config):
    file = write_config({
        "target": {"host": "ctf.example.org", "port": 1337, "timeout_ms": 300},
        "script": {
            "rules": [{"expect": "name\\?", "reply": "alice"}],
            "max_replies": 5,
        },
    })
    cli_config(file)

    config = ProbeConfig()  # type: ignore[call-arg]

    assert config.target.host == "ctf.example.org"
    assert config.target.port == 1337
    assert config.target.timeout_ms == 300
    assert config.script.rules[0].expect == "name\\?"
    assert config.script.rules[0].reply == "alice"
    assert config.script.max_replies == 5
    assert config.script.stop_on_empty is True


@pytest.mark.ut
def test_defaults(write_config, cli_config):
    cli_config(write_config({"target": {"port": 4000}}))

    config = ProbeConfig()  # type: ignore[call-arg]

    assert config.target.host == "localhost"
    assert config.target.timeout_ms == 1000
    assert config.script.rules == []
    assert config.script.max_replies is None


@pytest.mark.ut
def test_env_overrides_yaml(write_config, cli_config, monkeypatch):
    cli_config(write_config({"target": {"host": "a.example", "port": 4000}}))
    monkeypatch.setenv("TCPROBE_TARGET__PORT", "5000")

    config = ProbeConfig()  # type: ignore[call-arg]

    assert config.target.host == "a.example"
    assert config.target.port == 5000


@pytest.mark.ut
def test_init_overrides_yaml(write_config, cli_config):
    cli_config(write_config({"target": {"host": "a.example", "port": 4000, "timeout_ms": 50}}))

    config = ProbeConfig(target={"port": 6000})  # type: ignore[call-arg]

    assert config.target.host == "a.example"
    assert config.target.port == 6000
    assert config.target.timeout_ms == 50


@pytest.mark.ut
def test_without_file(cli_config, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cli_config(None)

    config = ProbeConfig(target={"port": 7})  # type: ignore[call-arg]

    assert config.target.port == 7


@pytest.mark.ut
@pytest.mark.parametrize(
    "target, location",
    [
        ({"port": 70000}, "target.port"),
        ({"port": 4000, "timeout_ms": 0}, "target.timeout_ms"),
        ({"host": "localhost"}, "target.port"),
    ],
)
def test_invalid_target_is_reported(write_config, cli_config, target, location):
    cli_config(write_config({"target": target}))

    with pytest.raises(SystemExit) as info:
        get_config()

    message = str(info.value.code)
    assert message.startswith("Configuration validation failed:")
    assert location in message


@pytest.mark.ut
def test_invalid_regex_is_reported(write_config, cli_config):
    cli_config(write_config({
        "target": {"port": 4000},
        "script": {"rules": [{"expect": "(unclosed", "reply": "x"}]},
    }))

    with pytest.raises(SystemExit) as info:
        get_config()

    assert "script.rules.0.expect" in str(info.value.code)


@pytest.mark.ut
def test_configfile_resolution(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TCPROBECONFIG", raising=False)
    assert get_configfile(None) is None

    default = tmp_path / "tcprobe.yaml"
    default.write_text("target: {port: 1}\n")
    assert get_configfile(None) == default

    other = tmp_path / "other.yaml"
    other.write_text("target: {port: 2}\n")
    monkeypatch.setenv("TCPROBECONFIG", str(other))
    assert get_configfile(None) == other

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("target: {port: 3}\n")
    assert get_configfile(str(explicit)) == explicit


@pytest.mark.ut
def test_configfile_missing_explicit_path(tmp_path):
    with pytest.raises(SystemExit, match="Configuration file not found"):
        get_configfile(str(tmp_path / "missing.yaml"))


@pytest.mark.ut
def test_parser_run_arguments():
    args = build_parser().parse_args(
        ["-c", "probe.yaml", "-l", "DEBUG", "run", "--host", "h", "--port", "9", "--timeout", "2s"]
    )

    assert args.config == "probe.yaml"
    assert args.log_level == "DEBUG"
    assert args.command == "run"
    assert (args.host, args.port, args.timeout) == ("h", 9, "2s")


@pytest.mark.ut
def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.ut
@pytest.mark.parametrize("reply", ['{"cmd": "ls"}', "{1}", "{name}"])
def test_unrenderable_reply_is_reported(write_config, cli_config, reply):
    cli_config(write_config({
        "target": {"port": 4000},
        "script": {"rules": [{"expect": "(\\w+)>", "reply": reply}]},
    }))

    with pytest.raises(SystemExit) as info:
        get_config()

    message = str(info.value.code)
    assert "script.rules.0" in message
    assert "cannot be rendered" in message


@pytest.mark.ut
def test_reply_may_use_named_groups_and_escaped_braces():
    settings = RuleSettings(expect="(?P<name>\\w+)>", reply='{{"cmd": "ls"}} {name} {0}')
    assert settings.reply == '{{"cmd": "ls"}} {name} {0}'
