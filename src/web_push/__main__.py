"""
Web Push command line.

Generate keys, encrypt payloads, and deliver notifications from a shell.

Usage::

    python -m web_push keygen
    python -m web_push encrypt --key BASE64URL_P256DH --payload "hello"
    python -m web_push send https://push.example/abc --key BASE64URL_P256DH --payload "hello"
    python -m web_push send https://android.googleapis.com/gcm/send --gcm-body '{"to": "..."}'

Options:
    --key          Recipient public key (base64url uncompressed P-256 point)
    --payload      Message text, encoded as UTF-8
    --gcm-body     Legacy GCM JSON body (sent without encryption)
    --gcm-api-key  Legacy GCM API key (default: $GCM_API_KEY)
    --ttl          Seconds the push service may hold the message
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from web_push.config import DEFAULT_TTL, PushServiceConfig
from web_push.dispatch import (
    EncryptedNotification,
    GcmNotification,
    HttpxTransport,
    Notification,
    PushService,
    encryption_header,
    encryption_key_header,
)
from web_push.encryption import (
    b64url_decode,
    b64url_encode,
    encrypt,
    generate_p256_keypair,
    private_key_to_bytes,
    public_key_to_uncompressed,
)
from web_push.types import WebPushError

logger = logging.getLogger(__name__)

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("httpx", "httpcore")
"""HTTP client loggers that echo every request; kept at WARNING unless verbose."""


class ColoredFormatter(logging.Formatter):
    """
    Log formatter that colors the level and shortens package logger names.

    `web_push.dispatch.service` is shown as `dispatch.service`.
    """

    RESET = "\x1b[0m"
    DIM = "\x1b[2m"
    NAME = "\x1b[38;5;39m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;5;244m",
        logging.INFO: "\x1b[38;5;40m",
        logging.WARNING: "\x1b[38;5;220m",
        logging.ERROR: "\x1b[38;5;196m",
        logging.CRITICAL: "\x1b[38;5;196;1m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        name = record.name.removeprefix("web_push.")

        line = (
            f"{self.DIM}{self.formatTime(record, self.datefmt)}{self.RESET} "
            f"{color}{record.levelname:<8}{self.RESET} "
            f"{self.NAME}{name}{self.RESET}: {record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """
    Send log records to stderr.

    Calling again replaces the handler installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.set_name("web_push.cli")
    if no_color:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", LOG_DATE_FORMAT)
        )
    else:
        handler.setFormatter(ColoredFormatter(datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == handler.get_name()]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def cmd_keygen(args: argparse.Namespace) -> int:
    """Print a fresh P-256 key pair."""
    private_key = generate_p256_keypair()
    print(f"PRIVATE_KEY={b64url_encode(private_key_to_bytes(private_key))}")
    print(f"PUBLIC_KEY={b64url_encode(public_key_to_uncompressed(private_key.public_key()))}")
    return 0


def cmd_encrypt(args: argparse.Namespace) -> int:
    """Encrypt a payload and print the header values and ciphertext."""
    encrypted = encrypt(b64url_decode(args.key), args.payload.encode("utf-8"))
    print(f"Encryption: {encryption_header(encrypted.salt)}")
    print(f"Encryption-Key: {encryption_key_header(encrypted.public_key)}")
    print(f"Ciphertext: {b64url_encode(encrypted.ciphertext)}")
    return 0


def build_notification(args: argparse.Namespace) -> Notification:
    """Build the notification described by the `send` arguments."""
    if args.gcm_body is not None:
        return GcmNotification(endpoint=args.endpoint, body=args.gcm_body, ttl=args.ttl)
    if args.key is None or args.payload is None:
        raise ValueError("--key and --payload are required unless --gcm-body is given")
    return EncryptedNotification.from_base64(args.endpoint, args.key, args.payload, args.ttl)


def cmd_send(args: argparse.Namespace) -> int:
    """Deliver one notification and print the response status."""
    config = PushServiceConfig.from_env(os.environ)
    if args.gcm_api_key:
        config = config.model_copy(update={"gcm_api_key": args.gcm_api_key})

    notification = build_notification(args)

    with HttpxTransport(timeout=config.timeout_secs) as transport:
        response = PushService(config, transport).send(notification)

    print(response.status_code)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="web_push",
        description="Web Push message encryption and delivery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    keygen = commands.add_parser("keygen", help="Generate a P-256 key pair")
    keygen.set_defaults(handler=cmd_keygen)

    enc = commands.add_parser("encrypt", help="Encrypt a payload for a browser key")
    enc.add_argument("--key", required=True, help="Recipient public key (base64url)")
    enc.add_argument("--payload", required=True, help="Message text")
    enc.set_defaults(handler=cmd_encrypt)

    send = commands.add_parser("send", help="Deliver a notification")
    send.add_argument("endpoint", help="Push service URL")
    send.add_argument("--key", default=None, help="Recipient public key (base64url)")
    send.add_argument("--payload", default=None, help="Message text")
    send.add_argument("--gcm-body", default=None, help="Legacy GCM JSON body")
    send.add_argument("--gcm-api-key", default=None, help="Legacy GCM API key")
    send.add_argument(
        "--ttl",
        type=int,
        default=DEFAULT_TTL,
        help=f"Seconds the push service may hold the message (default: {DEFAULT_TTL})",
    )
    send.set_defaults(handler=cmd_send)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        return args.handler(args)
    except (WebPushError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
