"""Tests for the command line interface."""

import logging

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from tests.web_push.helpers import RecordingTransport
from web_push import __main__ as cli
from web_push.encryption import (
    Encrypted,
    b64url_decode,
    b64url_encode,
    decrypt,
    load_private_key,
    public_key_to_uncompressed,
)


def _lines(output: str) -> dict[str, str]:
    """Split `NAME=value` or `Name: value` lines into a mapping."""
    result = {}
    for line in output.strip().splitlines():
        name, sep, value = line.partition("=") if ": " not in line else line.partition(": ")
        result[name] = value
    return result


class _FakeHttpxTransport(RecordingTransport):
    """Drop-in for HttpxTransport that records instead of sending."""

    instances: list["_FakeHttpxTransport"] = []

    def __init__(self, timeout: float) -> None:
        super().__init__(status_code=201)
        self.timeout = timeout
        _FakeHttpxTransport.instances.append(self)

    def __enter__(self) -> "_FakeHttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        pass


@pytest.fixture
def fake_transport(monkeypatch: pytest.MonkeyPatch) -> type[_FakeHttpxTransport]:
    """Replace the CLI's HTTP transport with a recording one."""
    _FakeHttpxTransport.instances = []
    monkeypatch.setattr(cli, "HttpxTransport", _FakeHttpxTransport)
    monkeypatch.delenv("GCM_API_KEY", raising=False)
    monkeypatch.delenv("WEB_PUSH_TIMEOUT_SECS", raising=False)
    return _FakeHttpxTransport


class TestKeygen:
    """Tests for the keygen command."""

    def test_prints_matching_key_pair(self, capsys: pytest.CaptureFixture[str]):
        """Test that the printed public key belongs to the printed private key."""
        assert cli.main(["--no-color", "keygen"]) == 0

        keys = _lines(capsys.readouterr().out)
        private_key = load_private_key(b64url_decode(keys["PRIVATE_KEY"]))
        public_key = b64url_decode(keys["PUBLIC_KEY"])

        assert public_key == public_key_to_uncompressed(private_key.public_key())


class TestEncrypt:
    """Tests for the encrypt command."""

    def test_output_decrypts(
        self, recipient_key: ec.EllipticCurvePrivateKey, capsys: pytest.CaptureFixture[str]
    ):
        """Test that the printed values let the recipient decrypt."""
        key = b64url_encode(public_key_to_uncompressed(recipient_key.public_key()))

        assert cli.main(["--no-color", "encrypt", "--key", key, "--payload", "hi there"]) == 0

        out = _lines(capsys.readouterr().out)
        encrypted = Encrypted(
            public_key=b64url_decode(out["Encryption-Key"].split("dh=")[1]),
            salt=b64url_decode(out["Encryption"].split("salt=")[1]),
            ciphertext=b64url_decode(out["Ciphertext"]),
        )

        assert decrypt(recipient_key, encrypted) == b"hi there"

    def test_invalid_key_fails(self, capsys: pytest.CaptureFixture[str]):
        """Test that a key that is not a P-256 point exits with status 1."""
        bad = b64url_encode(bytes(65))

        assert cli.main(["--no-color", "encrypt", "--key", bad, "--payload", "x"]) == 1
        assert capsys.readouterr().out == ""


class TestSend:
    """Tests for the send command."""

    def test_encrypted_send(
        self,
        recipient_public_key: ec.EllipticCurvePublicKey,
        fake_transport: type[_FakeHttpxTransport],
        capsys: pytest.CaptureFixture[str],
    ):
        """Test that an encrypted notification is delivered."""
        key = b64url_encode(public_key_to_uncompressed(recipient_public_key))

        status = cli.main(
            ["--no-color", "send", "https://push.example/a", "--key", key, "--payload", "hi"]
            + ["--ttl", "60"]
        )

        assert status == 0
        assert capsys.readouterr().out.strip() == "201"
        [request] = fake_transport.instances[0].requests
        assert request.url == "https://push.example/a"
        assert request.headers["TTL"] == "60"
        assert request.headers["Content-Encoding"] == "aesgcm128"

    def test_gcm_send_with_key_option(self, fake_transport: type[_FakeHttpxTransport]):
        """Test the legacy path with an API key from the command line."""
        status = cli.main(
            ["--no-color", "send", "https://gcm.example/send", "--gcm-body", "{}"]
            + ["--gcm-api-key", "k"]
        )

        assert status == 0
        [request] = fake_transport.instances[0].requests
        assert request.headers["Authorization"] == "key=k"

    def test_gcm_key_from_environment(
        self, fake_transport: type[_FakeHttpxTransport], monkeypatch: pytest.MonkeyPatch
    ):
        """Test that GCM_API_KEY is used when no option is given."""
        monkeypatch.setenv("GCM_API_KEY", "env-key")

        assert cli.main(["--no-color", "send", "https://gcm.example/send", "--gcm-body", "{}"]) == 0

        [request] = fake_transport.instances[0].requests
        assert request.headers["Authorization"] == "key=env-key"

    def test_gcm_without_key_fails(self, fake_transport: type[_FakeHttpxTransport]):
        """Test that a missing API key exits with status 1 and sends nothing."""
        status = cli.main(["--no-color", "send", "https://gcm.example/send", "--gcm-body", "{}"])

        assert status == 1
        assert fake_transport.instances[0].requests == []

    def test_missing_payload_fails(self, fake_transport: type[_FakeHttpxTransport]):
        """Test that the encrypted path needs both key and payload."""
        assert cli.main(["--no-color", "send", "https://push.example/a", "--payload", "x"]) == 1
        assert fake_transport.instances == []


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = {name: logging.getLogger(name).level for name in cli.NOISY_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)


class TestLogging:
    """Tests for CLI logging setup."""

    def test_repeated_setup_keeps_one_handler(self):
        """Test that running main twice does not duplicate log lines."""
        cli.setup_logging()
        cli.setup_logging(verbose=True, no_color=True)

        ours = [h for h in logging.getLogger().handlers if h.get_name() == "web_push.cli"]

        assert len(ours) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_http_client_logs_quiet_unless_verbose(self):
        """Test that per-request httpx logging is suppressed by default."""
        cli.setup_logging()
        assert logging.getLogger("httpx").level == logging.WARNING

        cli.setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_formatter_shortens_package_names(self):
        """Test that the package prefix is dropped from logger names."""
        record = logging.LogRecord(
            "web_push.dispatch.service", logging.INFO, __file__, 1, "sent %d", (3,), None
        )

        line = cli.ColoredFormatter().format(record)

        assert "dispatch.service" in line
        assert "web_push.dispatch" not in line
        assert "sent 3" in line


class TestConfigErrors:
    """Tests for configuration failures surfaced by the CLI."""

    def test_bad_timeout_fails(
        self,
        recipient_public_key: ec.EllipticCurvePublicKey,
        fake_transport: type[_FakeHttpxTransport],
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test that a malformed timeout exits with status 1 before sending."""
        monkeypatch.setenv("WEB_PUSH_TIMEOUT_SECS", "soon")
        key = b64url_encode(public_key_to_uncompressed(recipient_public_key))

        status = cli.main(
            ["--no-color", "send", "https://push.example/a", "--key", key, "--payload", "x"]
        )

        assert status == 1
        assert fake_transport.instances == []
