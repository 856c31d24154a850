#!/usr/bin/env python3
"""
otp_cli.py - CLI wrapper around the 2FA core.

Subcommands:
- generate-keys : create the student RSA 4096 key pair (PEM)
- verify-key    : check that a PEM file holds an RSA public key
- request-seed  : ask the instructor API for an encrypted seed
- decrypt-seed  : decrypt encrypted_seed.txt and store the hex seed
- totp          : print the current TOTP code (or watch it in real time)
- verify        : verify a TOTP code against the stored seed
- commit-proof  : sign the latest commit and encrypt the signature
- log-2fa       : one cron line "YYYY-MM-DD HH:MM:SS - 2FA Code: XXXXXX"

eg..:
    pki2fa generate-keys
    pki2fa decrypt-seed --input encrypted_seed.txt --seed-file data/seed.txt
    pki2fa totp --seed-file data/seed.txt --watch
    pki2fa verify --seed-file data/seed.txt --code 123456
    pki2fa commit-proof --instructor-key instructor_public.pem
"""

import argparse
import logging
import sys
import time
from datetime import datetime, timezone

from pki2fa_store import FileSeedStore, default_seed_path

from . import keys
from .errors import TwoFactorError
from .git_utils import current_commit_hash
from .otp_core import DEFAULT_WINDOW, generate_totp_code, verify_totp_code
from .protocols import generate_commit_proof, provision_seed_b64
from .seed_client import request_encrypted_seed

logger = logging.getLogger("pki2fa.cli")

STUDENT_PRIVATE_KEY = "student_private.pem"
STUDENT_PUBLIC_KEY = "student_public.pem"
INSTRUCTOR_PUBLIC_KEY = "instructor_public.pem"
ENCRYPTED_SEED_FILE = "encrypted_seed.txt"
COMMIT_PROOF_FILE = "commit_proof.json"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _load_seed(path: str) -> str:
    seed = FileSeedStore(path).get()
    if seed is None:
        raise FileNotFoundError(f"Seed file not found: {path} (run decrypt-seed first)")
    return seed


# --- CLI command handlers ---
def cmd_generate_keys(args) -> int:
    logger.debug("Generating RSA %d-bit key pair (e=65537)", args.bits)
    keys.write_keypair(args.private, args.public, key_size=args.bits)
    print(f"[*] Generated {args.private} (PKCS8, mode 600) and {args.public} (SPKI)")
    return 0


def cmd_verify_key(args) -> int:
    info = keys.describe_public_key(keys.load_public_key(args.path))
    print(f"[+] Key is valid: type={info['type']}, size={info['bits']} bits")
    return 0


def cmd_request_seed(args) -> int:
    with open(args.public_key, "r", encoding="utf-8") as f:
        public_pem = f.read()
    logger.debug("Requesting encrypted seed from %s", args.api_url)
    encrypted_seed = request_encrypted_seed(
        args.api_url, args.student_id, args.repo_url, public_pem, timeout=args.timeout
    )
    with open(args.out, "w", encoding="utf-8") as f:
        f.write(encrypted_seed)
    print(f"[+] Encrypted seed saved to: {args.out}")
    return 0


def cmd_decrypt_seed(args) -> int:
    with open(args.input, "r", encoding="utf-8") as f:
        encrypted_seed = f.read().strip()
    private_key = keys.load_private_key(args.key)

    logger.debug("RSA/OAEP decrypt: SHA-256, MGF1(SHA-256), no label")
    seed = provision_seed_b64(encrypted_seed, private_key)
    FileSeedStore(args.seed_file).put(seed)
    print(f"[+] Seed decrypted and saved to: {args.seed_file}")
    return 0


def cmd_totp(args) -> int:
    seed = _load_seed(args.seed_file)
    if not args.watch:
        code, remaining = generate_totp_code(seed, time.time())
        print(f"TOTP: {code}  (valid {remaining}s)")
        return 0

    print("Press Ctrl+C to quit. Generating TOTP in real time...\n")
    last_code = None
    try:
        while True:
            code, remaining = generate_totp_code(seed, time.time())
            if code != last_code:
                print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end="\r", flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_verify(args) -> int:
    seed = _load_seed(args.seed_file)
    if verify_totp_code(seed, args.code, time.time(), window=args.window):
        print("[+] TOTP code is VALID")
        return 0
    print("[-] TOTP code is INVALID")
    return 2


def cmd_commit_proof(args) -> int:
    commit_hash = args.commit or current_commit_hash()
    logger.debug("Commit hash: %s", commit_hash)
    signer_key = keys.load_private_key(args.key)
    instructor_key = keys.load_public_key(args.instructor_key)

    logger.debug("RSA-PSS sign (SHA-256, MGF1, max salt), then RSA/OAEP-SHA256 encrypt")
    proof = generate_commit_proof(commit_hash, signer_key, instructor_key)
    with open(args.out, "w", encoding="utf-8") as f:
        f.write(proof.to_json())

    print("Commit Hash:")
    print(proof.commit_hash)
    print("\nEncrypted Signature:")
    print(proof.encrypted_signature)
    print(f"\n[+] Commit proof saved to: {args.out}")
    return 0


def cmd_log_2fa(args) -> int:
    try:
        code, _ = generate_totp_code(_load_seed(args.seed_file), time.time())
    except (OSError, TwoFactorError) as e:
        print(f"{_utc_stamp()} - ERROR: {e}", file=sys.stderr)
        return 1
    print(f"{_utc_stamp()} - 2FA Code: {code}")
    return 0


def cmd_help(args) -> int:
    print("'pki2fa -h' for help.")
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="PKI-based 2FA tools (RSA/OAEP seed, TOTP, commit proof)")
    p.add_argument("--verbose", action="store_true", help="Log each step")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    pg = sub.add_parser("generate-keys", help="Generate the student RSA key pair")
    pg.add_argument("--private", default=STUDENT_PRIVATE_KEY, help="Private key output (PEM PKCS8)")
    pg.add_argument("--public", default=STUDENT_PUBLIC_KEY, help="Public key output (PEM SPKI)")
    pg.add_argument("--bits", type=int, default=keys.DEFAULT_KEY_SIZE, help="Modulus size")
    pg.set_defaults(func=cmd_generate_keys)

    pk = sub.add_parser("verify-key", help="Check an RSA public key PEM file")
    pk.add_argument("--path", default=INSTRUCTOR_PUBLIC_KEY)
    pk.set_defaults(func=cmd_verify_key)

    pr = sub.add_parser("request-seed", help="Request an encrypted seed from the instructor API")
    pr.add_argument("--api-url", required=True)
    pr.add_argument("--student-id", required=True)
    pr.add_argument("--repo-url", required=True, help="Exact GitHub repository URL")
    pr.add_argument("--public-key", default=STUDENT_PUBLIC_KEY)
    pr.add_argument("--out", default=ENCRYPTED_SEED_FILE)
    pr.add_argument("--timeout", type=float, default=30)
    pr.set_defaults(func=cmd_request_seed)

    pd = sub.add_parser("decrypt-seed", help="Decrypt the encrypted seed and store it")
    pd.add_argument("--input", default=ENCRYPTED_SEED_FILE, help="Base64 ciphertext file")
    pd.add_argument("--key", default=STUDENT_PRIVATE_KEY)
    pd.add_argument("--seed-file", default=default_seed_path())
    pd.set_defaults(func=cmd_decrypt_seed)

    pt = sub.add_parser("totp", help="Show the current TOTP code")
    pt.add_argument("--seed-file", default=default_seed_path())
    pt.add_argument("--watch", action="store_true", help="Refresh in real time")
    pt.set_defaults(func=cmd_totp)

    pv = sub.add_parser("verify", help="Verify a TOTP code")
    pv.add_argument("--seed-file", default=default_seed_path())
    pv.add_argument("--code", required=True, help="OTP code to verify")
    pv.add_argument("--window", type=int, default=DEFAULT_WINDOW, help="Allowed +/- step window")
    pv.set_defaults(func=cmd_verify)

    pc = sub.add_parser("commit-proof", help="Sign the latest commit and encrypt the signature")
    pc.add_argument("--commit", help="Commit hash (default: git log -1)")
    pc.add_argument("--key", default=STUDENT_PRIVATE_KEY)
    pc.add_argument("--instructor-key", default=INSTRUCTOR_PUBLIC_KEY)
    pc.add_argument("--out", default=COMMIT_PROOF_FILE)
    pc.set_defaults(func=cmd_commit_proof)

    pl = sub.add_parser("log-2fa", help="Print one timestamped code line (for cron)")
    pl.add_argument("--seed-file", default=default_seed_path())
    pl.set_defaults(func=cmd_log_2fa)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    try:
        return args.func(args)
    except (TwoFactorError, OSError, RuntimeError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
