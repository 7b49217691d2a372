"""CSV activity log for the QR decoding server."""

from datetime import datetime
from os import PathLike
from typing import Union

LOG_PATH = "log.csv"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_log_line(
    timestamp: datetime, ip: str, kind: str, violations: str, url: str
) -> str:
    """Render one log row: time, IP, type, violations, URL."""
    return f"{timestamp.strftime(TIME_FORMAT)}, {ip}, {kind}, {violations}, {url}"


def write_log(
    ip: str = "",
    kind: str = "",
    violations: str = "",
    url: str = "",
    path: Union[str, "PathLike[str]"] = LOG_PATH,
) -> None:
    """Append a row stamped with the current local time to the log file."""
    line = format_log_line(datetime.now(), ip, kind, violations, url)
    with open(path, "a", encoding="utf-8") as log:
        log.write(line + "\n")