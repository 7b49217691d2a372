"""A TCP server that decodes QR code images sent by clients."""

import argparse
import os
import re
import socket
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from .qrlog import LOG_PATH, write_log

MAX_IMAGE_SIZE = 250_000
RECV_BUFSIZE = 32
_STALLED_REMAINDER = 28

DEFAULT_DECODER: Tuple[str, ...] = (
    "java",
    "-cp",
    "javase.jar:core.jar",
    "com.google.zxing.client.j2se.CommandLineRunner",
)

_ERROR_MESSAGES = {
    1: "No barcode found",
    2: "Timeout. Either took too long to respond, or server is too busy.",
    3: "Rate limit exceeded, image too large.",
}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def error_message(status_code: int) -> str:
    """The message sent to a client alongside a non-zero status code."""
    return _ERROR_MESSAGES.get(status_code, "")


def extract_url(lines: Iterable[str]) -> Optional[str]:
    """Pick the decoded URL out of the decoder's output.

    The URL is the line following "Parsed result". Returns None when the
    decoder reports that no barcode was found, and '' when neither appears.
    """
    expecting = False
    for line in lines:
        if "Parsed result" in line:
            expecting = True
        elif expecting:
            return line.removesuffix("\n")
        elif "No barcode found" in line:
            return None
    return ""


@dataclass
class ServerConfig:
    """Settings for the QR server."""

    port: int = 2012
    rate: int = 3
    max_connections: int = 3
    timeout: int = 80
    log_path: str = LOG_PATH
    work_dir: str = "."
    decoder_command: Tuple[str, ...] = DEFAULT_DECODER
    countdown: int = 3
    tick: float = 1.0


def parse_args(argv: Optional[Sequence[str]] = None) -> ServerConfig:
    """Read --port, --rate, --max and --timeout; unknown options are ignored."""
    args = sys.argv[1:] if argv is None else list(argv)
    defaults = ServerConfig()
    parser = argparse.ArgumentParser(prog="qrserver", add_help=False)
    parser.add_argument("-p", "--port", type=_atoi, default=defaults.port)
    parser.add_argument("-r", "--rate", type=_atoi, default=defaults.rate)
    parser.add_argument("-m", "--max", type=_atoi, default=defaults.max_connections)
    parser.add_argument("-t", "--timeout", type=_atoi, default=defaults.timeout)
    known, _unknown = parser.parse_known_args(args)
    return ServerConfig(
        port=known.port,
        rate=known.rate,
        max_connections=known.max,
        timeout=known.timeout,
    )


def _echo(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        print(line, end="")
        yield line


class QRServer:
    """Accepts images over TCP, decodes them and replies with the result."""

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        self.config = config if config is not None else ServerConfig()
        self._log_lock = threading.Lock()
        self._slots_lock = threading.Lock()
        self._active = 0
        self._next_id = 0

    def _log(self, ip: str, kind: str, violations: str = "", url: str = "") -> None:
        with self._log_lock:
            write_log(ip, kind, violations, url, self.config.log_path)

    def _fatal(self, message: str) -> OSError:
        print(message, file=sys.stderr)
        self._log("", "Error", message)
        return OSError(message)

    def _countdown(self) -> None:
        print("Sending in")
        for remaining in range(self.config.countdown, 0, -1):
            print(remaining)
            time.sleep(self.config.tick)
        print("Now.")

    def _send(self, conn: socket.socket, payload: bytes, failure: str) -> None:
        try:
            conn.sendall(payload)
        except OSError as exc:
            raise self._fatal(failure) from exc

    def _claim_slot(self) -> bool:
        with self._slots_lock:
            # The listening socket occupies one of the slots.
            if 1 + self._active < self.config.max_connections:
                self._active += 1
                return True
            return False

    def _release_slot(self) -> None:
        with self._slots_lock:
            self._active -= 1

    def _run_client(self, conn: socket.socket, thread_num: int, ip: str) -> None:
        try:
            self.handle_client(conn, thread_num, ip)
        except OSError as exc:
            print(exc, file=sys.stderr)
        finally:
            conn.close()
            self._release_slot()

    def serve_forever(self) -> None:
        """Listen on the configured port and serve clients until interrupted."""
        config = self.config
        self._log("", "Server startup attempt")
        try:
            listener = socket.create_server(("", config.port), backlog=10)
        except OSError as exc:
            raise self._fatal("Failed to bind listener") from exc
        with listener:
            listener.settimeout(config.timeout if config.timeout > 0 else None)
            print(f"Server running on port {config.port}")
            self._log("", "Server startup")
            while True:
                try:
                    conn, address = listener.accept()
                except TimeoutError:
                    continue
                except OSError as exc:
                    raise self._fatal("accept() failed") from exc
                ip = str(address[0])
                self._log(ip, "New connection")
                print(f"New connection from {conn.fileno()}")
                if not self._claim_slot():
                    try:
                        self.send_error(conn, 2, ip)
                    except OSError as exc:
                        print(exc, file=sys.stderr)
                    finally:
                        conn.close()
                    continue
                thread_num = self._next_id
                self._next_id += 1
                threading.Thread(
                    target=self._run_client,
                    args=(conn, thread_num, ip),
                    daemon=True,
                ).start()

    def send_error(self, conn: socket.socket, status_code: int, ip: str) -> None:
        """Send a status code and its message, then close the connection."""
        print("Sending error")
        self._log(ip, "Sending status code")
        self._send(
            conn,
            str(status_code).encode(),
            "send() could not send status code back to client",
        )
        message = error_message(status_code).encode()
        self._countdown()
        self._log(ip, "Sending error length")
        self._send(
            conn,
            str(len(message)).encode(),
            "send() could not send error length back to client",
        )
        self._countdown()
        self._log(ip, "Sending error")
        self._log(ip, "Error", error_message(status_code))
        self._send(conn, message, "send() could not send error back to client")
        print("Error sent")
        conn.close()

    def handle_client(self, conn: socket.socket, thread_num: int, ip: str) -> None:
        """Receive one image from ``conn``, decode it and reply."""
        try:
            header = conn.recv(RECV_BUFSIZE)
        except OSError:
            print("recv() failed or connection closed prematurely")
            header = b""
        self._log(ip, "Image length received")
        length = _atoi(header.decode("latin-1"))
        if length < 0 or length > MAX_IMAGE_SIZE:
            self._log(ip, "Image too large", "RATE")
            self.send_error(conn, 3, ip)
            return

        path = Path(self.config.work_dir) / f"{thread_num}.png"
        try:
            image_file = open(path, "wb")
        except OSError as exc:
            raise self._fatal("Failed to open file") from exc
        with image_file:
            received = bytearray()
            while len(received) < length:
                self._log(ip, "Image data received")
                remaining = length - len(received)
                if remaining == _STALLED_REMAINDER:
                    image_file.close()
                    self.send_error(conn, 2, ip)
                    return
                try:
                    chunk = conn.recv(remaining)
                except OSError:
                    chunk = b""
                if not chunk:
                    print("recv() failed or connection closed prematurely")
                    self._log(ip, "Image data receive failed")
                    self._log(ip, "Connection closed")
                    return
                received += chunk
            try:
                image_file.write(received)
            except OSError as exc:
                raise self._fatal("Failed to write image data to file") from exc

        self._log(ip, "Image fully received")
        self.analyze_and_send(conn, str(path), ip)
        conn.close()
        self._log(ip, "Connection closed")

    def analyze_and_send(self, conn: socket.socket, name: str, ip: str) -> None:
        """Decode the image file ``name`` and send the URL found in it."""
        try:
            size = os.stat(name).st_size
        except OSError:
            size = 0
        print(f"File size: {size}")
        print(f"analyzing image {name}")
        command = [*self.config.decoder_command, name]
        try:
            process = subprocess.Popen(command, stdout=subprocess.PIPE, text=True)
        except OSError as exc:
            raise self._fatal("Failed to run Java command") from exc
        print("Attempted to run Java command...")
        with process:
            assert process.stdout is not None
            url = extract_url(_echo(process.stdout))
        if url is None:
            self.send_error(conn, 1, ip)
            return
        print(f"URL: {url}")
        try:
            os.remove(name)
        except OSError as exc:
            raise self._fatal("Failed to remove image file") from exc

        self._log(ip, "Sending status code")
        self._send(conn, b"0", "send() could not send status code back to client")
        encoded = url.encode()
        print(f"URL length: {len(encoded)}")
        self._log(ip, "Sending URL length")
        self._send(
            conn,
            str(len(encoded)).encode(),
            "send() could not send URL length back to client",
        )
        self._countdown()
        self._log(ip, "Sending URL", "", url)
        self._send(conn, encoded, "send() could not send URL back to client")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    print("".join(f"{arg} " for arg in ["qrserver", *args]))
    config = parse_args(args)
    server = QRServer(config)
    try:
        server.serve_forever()
    except OSError:
        return -1
    except KeyboardInterrupt:
        write_log("", "Server shutdown", "", "", config.log_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())