"""
Command-line interface for dkim-signer
Signs a message read from a file or stdin and writes the result to stdout
"""

import argparse
import logging
import sys
from typing import Optional

from . import __version__
from .exceptions import DKIMSignerError
from .signing import (
    DEFAULT_SIGNED_HEADERS,
    SigningOptions,
    create_signer,
    create_signing_config,
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='dkim-sign',
        description='Add a DKIM-Signature header to an email message'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'dkim-signer {__version__}'
    )
    parser.add_argument('message', nargs='?', default='-',
                        help='Message file to sign (default: read stdin)')
    parser.add_argument('-d', '--domain', required=True, help='Signing domain (d= tag)')
    parser.add_argument('-s', '--selector', required=True, help='Key selector (s= tag)')
    parser.add_argument('-k', '--key', required=True, help='Path to PEM-encoded RSA private key')
    parser.add_argument(
        '-a', '--algorithm',
        default='rsa-sha256',
        help='Signing algorithm: rsa-sha256 or rsa-sha1 (default: rsa-sha256)'
    )
    parser.add_argument(
        '-c', '--canonicalization',
        default='relaxed/relaxed',
        help='Header/body canonicalization (default: relaxed/relaxed)'
    )
    parser.add_argument('-i', '--identity', help='Signing identity (i= tag)')
    parser.add_argument(
        '--headers',
        help='Colon-separated header names to sign, in order (default: common headers, each twice)'
    )
    parser.add_argument('--timestamp', type=int, help='Signing time as Unix timestamp (default: now)')
    parser.add_argument('--expiration', type=int, help='Expiration as Unix timestamp (x= tag)')
    parser.add_argument('--header-only', action='store_true',
                        help='Print only the DKIM-Signature header instead of the signed message')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')

    return parser


def _read_message(path: str) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()


def _read_key(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def handle_sign_command(args) -> int:
    """Handle signing of one message."""
    builder = (create_signing_config()
               .domain(args.domain)
               .selector(args.selector)
               .private_key(_read_key(args.key))
               .algorithm(args.algorithm)
               .canonicalization(args.canonicalization))

    if args.identity:
        builder.identity(args.identity)

    if args.headers:
        builder.signed_headers([h.strip() for h in args.headers.split(':') if h.strip()])
    else:
        builder.signed_headers(list(DEFAULT_SIGNED_HEADERS))

    signer = create_signer(builder.build())
    options = SigningOptions(timestamp=args.timestamp, expiration=args.expiration)

    message = _read_message(args.message)
    if args.header_only:
        output = signer.sign(message, options).header
    else:
        output = signer.sign_message(message, options)

    sys.stdout.buffer.write(output.encode('utf-8'))
    sys.stdout.flush()
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s', stream=sys.stderr)

    try:
        return handle_sign_command(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (DKIMSignerError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
