"""Client that sends an image to the QR decoding server and prints the reply."""

import re
import socket
import sys
import time
from os import PathLike
from typing import Optional, Sequence, Tuple, Union

LENGTH_FIELD_SIZE = 10
COUNTDOWN = 3

_INT_PREFIX = re.compile(rb"\s*([+-]?\d+)", re.ASCII)


class ClientError(Exception):
    """The image could not be sent or the server's reply could not be read."""


def _atoi(raw: bytes) -> int:
    match = _INT_PREFIX.match(raw)
    return int(match.group(1)) if match else 0


def _countdown(delay: float) -> None:
    print("Sending in")
    for remaining in range(COUNTDOWN, 0, -1):
        print(remaining)
        time.sleep(delay)
    print("Now.")


def _recv(conn: socket.socket, size: int) -> bytes:
    failure = "recv() failed or connection closed prematurely"
    if size <= 0:
        raise ClientError(failure)
    try:
        data = conn.recv(size)
    except OSError as exc:
        raise ClientError(failure) from exc
    if not data:
        raise ClientError(failure)
    return data


def send_image(
    path: Union[str, "PathLike[str]"],
    host: str,
    port: int,
    delay: float = 1.0,
) -> Tuple[int, str]:
    """Send the image at ``path`` to the server and return (status, message).

    The image length is sent as decimal text followed by the image bytes.
    The server answers with a one-digit status code, the message length as
    decimal text and the message itself. Raises ClientError on any failure.
    """
    try:
        with open(path, "rb") as image_file:
            image = image_file.read()
    except OSError as exc:
        raise ClientError("Failed to open file") from exc

    try:
        conn = socket.create_connection((host, port))
    except OSError as exc:
        raise ClientError("connect() failed") from exc

    with conn:
        _countdown(delay)
        try:
            conn.sendall(str(len(image)).encode("ascii"))
            conn.sendall(image)
        except OSError as exc:
            raise ClientError("send() could not send URL back to client") from exc

        status_code = _atoi(_recv(conn, 1))
        print(f"Received status code: {status_code}")
        print("Receiving message in 3 seconds")
        length = _atoi(_recv(conn, LENGTH_FIELD_SIZE))
        message = _recv(conn, length).decode("utf-8", errors="replace")
        print(f"Received message:\n{message}")
    return status_code, message


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print(
            "Usage: qrclient <Filename> <Server IP> [<Echo Port>]",
            file=sys.stderr,
        )
        return 1
    filename, host, port_text = args
    port = _atoi(port_text.encode("ascii", errors="replace")) & 0xFFFF
    try:
        send_image(filename, host, port)
    except ClientError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())