"""
Tests for the commitment-vrf command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from commitment_vrf.cli import main
from commitment_vrf.config import INSECURE_DETERMINISTIC_ENV_VAR
from commitment_vrf.feature_flags import set_insecure_deterministic_enabled

SCENARIO_HEX = (
    "000000000001e240"
    "0000000000000009"
    "53746174696f6e3132"
    "00000000000f423f"
    "0000000000000011"
    "3078313233343536373839616263646566"
    "01"
)
PRIVATE_KEY = "00" * 31 + "07"


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv(INSECURE_DETERMINISTIC_ENV_VAR, raising=False)
    set_insecure_deterministic_enabled(None)
    return CliRunner()


def _fields(output):
    result = {}
    for line in output.splitlines():
        if ":" in line:
            key, _, value = line.partition(":")
            result[key.strip()] = value.strip()
    return result


def _prove(runner, *extra, env=None):
    result = runner.invoke(
        main, ["prove", "--key", PRIVATE_KEY, "--message", SCENARIO_HEX, *extra], env=env
    )
    assert result.exit_code == 0, result.output
    return result


def _public_key(runner):
    result = runner.invoke(main, ["pubkey", PRIVATE_KEY])
    assert result.exit_code == 0, result.output
    return result.output.strip()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_keygen(runner):
    result = runner.invoke(main, ["keygen"])
    assert result.exit_code == 0
    fields = _fields(result.output)
    assert len(fields["private_key"]) == 64
    assert len(fields["public_key"]) == 66


def test_keygen_pubkey_agree(runner):
    fields = _fields(runner.invoke(main, ["keygen"]).output)
    result = runner.invoke(main, ["pubkey", fields["private_key"]])
    assert result.output.strip() == fields["public_key"]


def test_pubkey_invalid(runner):
    result = runner.invoke(main, ["pubkey", "00" * 32])
    assert result.exit_code == 1
    assert "InvalidKeyEncodingError" in result.output


def test_encode_scenario(runner):
    result = runner.invoke(
        main,
        [
            "encode",
            "--block-number", "123456",
            "--station-id", "Station12",
            "--upper-bound", "999999",
            "--requester", "0x123456789abcdef",
            "--extra-args", "1",
        ],
    )
    assert result.exit_code == 0, result.output
    assert result.output.strip() == SCENARIO_HEX


def test_encode_out_of_range(runner):
    result = runner.invoke(
        main,
        [
            "encode",
            "--block-number", "1",
            "--station-id", "s",
            "--upper-bound", "2",
            "--requester", "r",
            "--extra-args", "256",
        ],
    )
    assert result.exit_code == 1


def test_prove_and_verify(runner):
    fields = _fields(_prove(runner).output)
    pk = _public_key(runner)

    result = runner.invoke(
        main,
        [
            "verify",
            "--public-key", pk,
            "--message", SCENARIO_HEX,
            "--proof", fields["proof"],
            "--output", fields["output"],
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Proof valid" in result.output

    assert int(fields["output_int"]) == int(fields["output"], 16)


def test_verify_rejects_tampered_message(runner):
    fields = _fields(_prove(runner).output)
    pk = _public_key(runner)
    tampered = SCENARIO_HEX[:-2] + "02"

    result = runner.invoke(
        main,
        ["verify", "--public-key", pk, "--message", tampered, "--proof", fields["proof"]],
    )
    assert result.exit_code == 1
    assert "InvalidProofError" in result.output


def test_verify_truncated_proof(runner):
    fields = _fields(_prove(runner).output)
    pk = _public_key(runner)

    result = runner.invoke(
        main,
        [
            "verify",
            "--public-key", pk,
            "--message", SCENARIO_HEX,
            "--proof", fields["proof"][:-2],
        ],
    )
    assert result.exit_code == 1
    assert "TruncatedProofError" in result.output


def test_verify_requires_arguments(runner):
    result = runner.invoke(main, ["verify", "--message", SCENARIO_HEX])
    assert result.exit_code == 2


def test_prove_bad_hex(runner):
    result = runner.invoke(main, ["prove", "--key", PRIVATE_KEY, "--message", "zz"])
    assert result.exit_code == 2


def test_envelope_roundtrip(runner):
    envelope = _prove(runner, "--envelope").output.strip()
    result = runner.invoke(main, ["verify", "--envelope", envelope])
    assert result.exit_code == 0, result.output


def test_deterministic_requires_opt_in(runner):
    result = runner.invoke(
        main,
        ["prove", "--key", PRIVATE_KEY, "--message", SCENARIO_HEX, "--deterministic", "123456"],
    )
    assert result.exit_code == 1
    assert "InsecureOperationError" in result.output


def test_deterministic_reproducible(runner):
    env = {INSECURE_DETERMINISTIC_ENV_VAR: "1"}
    first = _fields(_prove(runner, "--deterministic", "123456", env=env).output)
    second = _fields(_prove(runner, "--deterministic", "123456", env=env).output)

    assert first["proof"] == second["proof"]
    assert first["output"] == second["output"]


def test_output_command(runner):
    fields = _fields(_prove(runner).output)

    result = runner.invoke(
        main, ["output", "--proof", fields["proof"], "--message", SCENARIO_HEX]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)

    assert data["output"] == fields["output"]
    assert data["output_int"] == fields["output_int"]
    assert data["deterministic_random_number"] != data["output"]


def test_output_command_without_message(runner):
    fields = _fields(_prove(runner).output)
    result = runner.invoke(main, ["output", "--proof", fields["proof"]])
    data = json.loads(result.output)
    assert "output" not in data
    assert len(data["deterministic_random_number"]) == 64
