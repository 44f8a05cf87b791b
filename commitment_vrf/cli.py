"""
Command-Line Interface for commitment-vrf

Key generation, commitment encoding, proof generation/verification and
output derivation. Binary values are read and printed as hex.
"""

import json
import logging
import sys

import click

from commitment_vrf import __version__
from commitment_vrf.commitment import RequestCommitment, encode_commitment
from commitment_vrf.exceptions import CommitmentVRFError
from commitment_vrf.keys import (
    derive_public_key,
    encode_public_key,
    export_private_key,
    generate_keypair,
    load_private_key,
)
from commitment_vrf.output import (
    derive_deterministic_random_number,
    derive_output,
    output_to_decimal,
)
from commitment_vrf.proof import (
    Proof,
    generate_insecure_deterministic_vrf_proof,
    generate_vrf_proof,
    verify_proof,
    verify_vrf_proof,
)
from commitment_vrf.types import ProofEnvelope, ProofKind


def _hex_bytes(value: str, what: str) -> bytes:
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise click.BadParameter(f"{what} is not valid hex")


def _fail(error: Exception) -> None:
    click.echo(
        click.style(f"✗ {type(error).__name__}: {error}", fg="red"), err=True
    )
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose):
    """
    commitment-vrf - Schnorr proofs over request commitments

    ⚠️  PROTOTYPE - NOT AUDITED
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@main.command()
def keygen():
    """Generate a key pair (private key hex, public key hex)."""
    keypair = generate_keypair()
    click.echo(f"private_key: {export_private_key(keypair.private_key)}")
    click.echo(f"public_key:  {keypair.public_key_bytes().hex()}")


@main.command()
@click.argument("private_key")
def pubkey(private_key):
    """Derive the public key for PRIVATE_KEY (hex)."""
    try:
        x = load_private_key(private_key)
    except CommitmentVRFError as e:
        _fail(e)
    click.echo(encode_public_key(derive_public_key(x)).hex())


@main.command()
@click.option("--block-number", type=int, required=True)
@click.option("--station-id", type=str, required=True)
@click.option("--upper-bound", type=int, required=True)
@click.option("--requester", type=str, required=True, help="Requester address")
@click.option("--extra-args", type=int, default=0, show_default=True)
def encode(block_number, station_id, upper_bound, requester, extra_args):
    """Encode a request commitment and print it as hex."""
    try:
        rc = RequestCommitment(
            block_number=block_number,
            station_id=station_id,
            upper_bound=upper_bound,
            requester_address=requester,
            extra_args=extra_args,
        )
    except (TypeError, ValueError) as e:
        _fail(e)
    click.echo(encode_commitment(rc).hex())


@main.command()
@click.option("--key", "private_key", required=True, help="Private key (hex)")
@click.option("--message", required=True, help="Message (hex), e.g. from `encode`")
@click.option(
    "--deterministic",
    "nonce_source",
    type=int,
    default=None,
    help="INSECURE: derive the nonce from this public integer "
    "(requires COMMITMENT_VRF_ALLOW_INSECURE_DETERMINISTIC=1)",
)
@click.option("--envelope", is_flag=True, help="Print a CBOR envelope (hex) instead")
def prove(private_key, message, nonce_source, envelope):
    """Generate a proof and VRF output over MESSAGE."""
    msg = _hex_bytes(message, "message")
    try:
        x = load_private_key(private_key)
        if nonce_source is None:
            kind = ProofKind.RANDOMIZED
            vrf_proof = generate_vrf_proof(x, msg)
        else:
            kind = ProofKind.DETERMINISTIC
            click.echo(
                click.style("⚠️  Deterministic proof: NOT SECURE", fg="yellow"),
                err=True,
            )
            vrf_proof = generate_insecure_deterministic_vrf_proof(x, msg, nonce_source)
    except (CommitmentVRFError, ValueError) as e:
        _fail(e)

    if envelope:
        env = ProofEnvelope.from_vrf_proof(derive_public_key(x), msg, vrf_proof, kind=kind)
        click.echo(env.serialize().hex())
        return

    click.echo(f"proof:      {vrf_proof.proof.to_bytes().hex()}")
    click.echo(f"output:     {vrf_proof.output.hex()}")
    click.echo(f"output_int: {output_to_decimal(vrf_proof.output)}")


@main.command()
@click.option("--public-key", help="Public key (hex)")
@click.option("--message", help="Message (hex)")
@click.option("--proof", "proof_hex", help="Proof (hex)")
@click.option("--output", "output_hex", default=None, help="Claimed VRF output (hex)")
@click.option("--envelope", "envelope_hex", default=None, help="CBOR envelope (hex)")
def verify(public_key, message, proof_hex, output_hex, envelope_hex):
    """Verify a proof (and optionally its VRF output)."""
    try:
        if envelope_hex is not None:
            ProofEnvelope.deserialize(_hex_bytes(envelope_hex, "envelope")).verify()
        else:
            if not (public_key and message and proof_hex):
                raise click.UsageError(
                    "--public-key, --message and --proof are required without --envelope"
                )
            pk = _hex_bytes(public_key, "public key")
            msg = _hex_bytes(message, "message")
            proof = _hex_bytes(proof_hex, "proof")
            if output_hex is None:
                verify_proof(pk, msg, proof)
            else:
                verify_vrf_proof(pk, msg, proof, _hex_bytes(output_hex, "output"))
    except (CommitmentVRFError, ValueError) as e:
        _fail(e)

    click.echo(click.style("✓ Proof valid", fg="green"))


@main.command()
@click.option("--proof", "proof_hex", required=True, help="Proof (hex)")
@click.option("--message", default=None, help="Message (hex) for the VRF output")
def output(proof_hex, message):
    """Derive outputs from a proof (JSON)."""
    try:
        proof_bytes = _hex_bytes(proof_hex, "proof")
        proof = Proof.from_bytes(proof_bytes)
    except CommitmentVRFError as e:
        _fail(e)

    random_number = derive_deterministic_random_number(proof_bytes)
    result = {
        "deterministic_random_number": random_number.hex(),
        "deterministic_random_number_int": output_to_decimal(random_number),
    }
    if message is not None:
        vrf_output = derive_output(proof.R, _hex_bytes(message, "message"))
        result["output"] = vrf_output.hex()
        result["output_int"] = output_to_decimal(vrf_output)

    click.echo(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
