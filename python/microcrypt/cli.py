#!/usr/bin/env python3
"""
MicroCrypt CLI - Command-line front end for string encryption.

Usage:
    microcrypt encrypt [TEXT] [-p PASSWORD] [--format {1,2}]
    microcrypt decrypt [TEXT] [-p PASSWORD]
    microcrypt digest [TEXT]

TEXT is read from stdin when omitted.

Examples:
    # Encrypt a note (v1 hex format)
    microcrypt encrypt "meet at noon"

    # Encrypt from stdin in the v2 base64 format
    echo -n "meet at noon" | microcrypt encrypt --format 2

    # Decrypt either format
    microcrypt decrypt 01a3f...

    # SHA-256 of text
    microcrypt digest abc
"""

import argparse
import getpass
import logging
import sys
from typing import Optional

from microcrypt import __version__
from microcrypt.core import DEFAULT_VERSION, VERSIONS, decrypt_message, encrypt_string
from microcrypt.errors import EncodingError
from microcrypt.encoding import utf8_encode
from microcrypt.sha256 import sha256


def get_password(prompt: str = "Password: ", confirm: bool = False) -> str:
    """Get password from user with optional confirmation."""
    password = getpass.getpass(prompt)
    if confirm:
        password2 = getpass.getpass("Confirm password: ")
        if password != password2:
            print("Error: Passwords do not match", file=sys.stderr)
            sys.exit(1)
    return password


def read_text(args: argparse.Namespace) -> str:
    """Positional text, or all of stdin."""
    if args.text is not None:
        return args.text
    return sys.stdin.read()


def cmd_encrypt(args: argparse.Namespace) -> int:
    """Encrypt text."""
    text = read_text(args)
    password = args.password if args.password is not None else get_password(confirm=True)

    try:
        print(encrypt_string(password, text, version=args.format))
        return 0
    except EncodingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_decrypt(args: argparse.Namespace) -> int:
    """Decrypt text."""
    text = read_text(args).strip()
    password = args.password if args.password is not None else get_password()

    result = decrypt_message(password, text)
    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    sys.stdout.write(result.plaintext)
    if sys.stdout.isatty():
        sys.stdout.write("\n")
    return 0


def cmd_digest(args: argparse.Namespace) -> int:
    """Print the SHA-256 of text."""
    try:
        data = utf8_encode(read_text(args))
    except EncodingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(sha256(data).hex())
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="microcrypt",
        description="MicroCrypt - password-based AES-256 string encryption",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"microcrypt {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # encrypt command
    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt text")
    encrypt_parser.add_argument("text", nargs="?", help="Text to encrypt (default: stdin)")
    encrypt_parser.add_argument("-p", "--password", help="Password (insecure, prefer prompt)")
    encrypt_parser.add_argument(
        "--format",
        type=int,
        choices=VERSIONS,
        default=DEFAULT_VERSION,
        help="Wire format: 1 = hex with checksum, 2 = base64",
    )

    # decrypt command
    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt text")
    decrypt_parser.add_argument("text", nargs="?", help="Text to decrypt (default: stdin)")
    decrypt_parser.add_argument("-p", "--password", help="Password (insecure, prefer prompt)")

    # digest command
    digest_parser = subparsers.add_parser("digest", help="SHA-256 of UTF-8 text")
    digest_parser.add_argument("text", nargs="?", help="Text to hash (default: stdin)")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "encrypt": cmd_encrypt,
        "decrypt": cmd_decrypt,
        "digest": cmd_digest,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
