import importlib.util
import json
from pathlib import Path

import pytest


_SCRIPT = Path(__file__).parent.parent / "scripts" / "twofish_cli.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("twofish_cli", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_encrypt_decrypt_cbc(cli, capsys):
    assert cli.main(["encrypt", "attack at dawn", "--key", "0123456789abcdef"]) == 0
    captured = capsys.readouterr()
    ciphertext = captured.out.strip()
    iv = captured.err.strip().splitlines()[-1].split("iv: ")[1]

    assert cli.main(["decrypt", ciphertext, "--key", "0123456789abcdef", "--iv", iv]) == 0
    assert capsys.readouterr().out.strip() == "attack at dawn"


def test_golden_vector_hex(cli, capsys):
    zero = "00" * 16
    argv = ["encrypt", zero, "--key", zero, "--key-encoding", "hex", "--mode", "ECB",
            "--input-encoding", "hex", "--output-encoding", "hex"]
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.strip() == "9f589f5cf6122c32b6bfec2f2ae8c35a"


def test_json_output(cli, capsys):
    assert cli.main(["encrypt", "hi", "--key", "0123456789abcdef", "--mode", "ecb", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == "ECB"
    assert payload["iv"] is None
    assert payload["output_encoding"] == "base64"


def test_no_trim_keeps_padding(cli, capsys):
    key = "0123456789abcdef"
    cli.main(["encrypt", "ab", "--key", key, "--mode", "ECB", "--output-encoding", "hex"])
    ct = capsys.readouterr().out.strip()
    assert cli.main(["decrypt", ct, "--key", key, "--mode", "ECB", "--input-encoding", "auto",
                     "--output-encoding", "hex", "--no-trim"]) == 0
    assert capsys.readouterr().out.strip() == "6162" + "00" * 14


def test_configuration_error_exit_code(cli, capsys):
    assert cli.main(["encrypt", "hello", "--key", "short"]) == 2
    assert "at least 8 bytes" in capsys.readouterr().err
