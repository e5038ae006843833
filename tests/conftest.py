import argparse

import pytest
import yaml

from tests.fake.fake_socket import FakeSocket


@pytest.fixture
def fake_socket():
    return FakeSocket()


@pytest.fixture
def write_config(tmp_path):
    def write(data: dict):
        file = tmp_path / "tcprobe.yaml"
        file.write_text(yaml.safe_dump(data, sort_keys=False))
        return file

    return write


@pytest.fixture
def cli_config(monkeypatch):
    """Point ProbeConfig at a given file without parsing sys.argv."""
    def use(path):
        namespace = argparse.Namespace(config=str(path) if path else None)
        monkeypatch.setattr(
            "tcprobe.bootstrap.config.settings.get_cli_args",
            lambda: namespace
        )

    monkeypatch.delenv("TCPROBECONFIG", raising=False)
    return use
