# wirekit

Two small networking tools: a summariser for pcap capture files, and a TCP
server and client that exchange QR-code images and the URLs decoded from them.

## wireview

Reads a classic libpcap capture file (microsecond or nanosecond timestamps,
either byte order) and prints a summary of the traffic.

```
wireview capture.pcap
```

It first reports whether the capture's link type is Ethernet
(`Ethernet data was provided` or `Ethernet data was not provided`). Then, for
each packet, it prints:

- the start time (local time, with microseconds), the capture length and the length
- the two 16-bit values that follow the IPv4 header, as `UDP Source Port` and
  `UDP Destination Port`, whenever the frame is long enough to hold them

After the last packet it prints `Final` and a report of:

- the total number of packets
- the unique senders and receivers: MAC address, IP address for IPv4 frames,
  whether the frame was ARP, and a packet count
- the hosts seen in ARP frames
- the sets of UDP source and destination ports, in ascending order
- the average (truncated to an integer), smallest and largest packet sizes

Frames too short for an Ethernet header, or IPv4 frames too short for an IPv4
header, are counted but otherwise skipped with a message on standard error.
The command exits with status 1 on a usage error, an unreadable file, or a
capture with no packets.

### From Python

```python
from wirekit.info import Info
from wirekit.pcapfile import open_pcap
from wirekit.wireview import format_timing, parse_packet

info = Info()
with open_pcap("capture.pcap") as reader:
    for record in reader:
        info.increment_packet_qty()
        info.add_packet_size(record.length)
        print(format_timing(record))
        parse_packet(info, record.data)
print(info)
```

- `open_pcap(path)` returns a `PcapReader`, which has `linktype`, `snaplen` and
  `version` and yields `PacketRecord` objects (`ts_sec`, `ts_usec`, `caplen`,
  `length`, `data`). Unreadable or truncated files raise `PcapError`.
- `parse_packet(info, data)` records a frame's hosts and ports in an `Info`
  and returns the port pair, or `None`.
- `Info` collects `Host` objects in `HostList`s (unique by MAC and IP address,
  sorted, with packet counts). `str(info)` renders the report and
  `info.average_packet_size()` gives the mean; both raise `ValueError` when no
  sizes were recorded.

## QR code server and client

### qrserver

```
qrserver --port 2012 --rate 3 --max 3 --timeout 80
```

All options are optional and take the values above by default; the short
forms `-p`, `-r`, `-m` and `-t` work too, and unknown options are ignored.

- `--port`: the TCP port to listen on.
- `--max`: the number of connection slots, one of which is taken by the
  listening socket, so at most `max - 1` clients are served at once. Further
  clients get status 2.
- `--timeout`: how many seconds an `accept` waits before the server loops
  round to wait again.
- `--rate`: read and kept in the configuration, but not enforced.

For each client the server reads the image length as decimal text, then the
image bytes (at most 250,000; larger images get status 3), and saves them as
`<n>.png` in the working directory. It decodes the image by running

```
java -cp javase.jar:core.jar com.google.zxing.client.j2se.CommandLineRunner <n>.png
```

and takes the line after `Parsed result` as the URL. So `java` must be on the
path and both jars must sit in the working directory. On success the image
file is removed and the server sends status `0`, the URL length as decimal
text, and the URL. Before sending a message it counts down three seconds.
Every event is appended as a CSV row (time, IP, type, violations, URL) to
`log.csv` in the working directory. Stop the server with Ctrl-C.

From Python, build a `ServerConfig` (directly or with `parse_args`) and call
`QRServer(config).serve_forever()`. `ServerConfig` also sets the log path,
the directory for received images, the decoder command and the countdown.

### qrclient

```
qrclient code.png 127.0.0.1 2012
```

All three arguments are required. After a three-second countdown the client
sends the image length and the image, then prints the status code and the
message it receives. From Python, `send_image(path, host, port, delay)`
returns `(status, message)` and raises `ClientError` on failure.

| Code | Meaning |
|------|---------|
| 0 | success, the message is the decoded URL |
| 1 | no barcode found |
| 2 | timeout, or the server is too busy |
| 3 | image too large |

## What this package does not do

- `wireview` reads capture files only; it cannot capture from a live interface,
  and it does not read pcapng files.
- The server does not decode QR codes itself; it relies on the external Java
  decoder described above.
- The server does not apply any rate limit, despite taking `--rate`.

## Tests

```
pip install -e .[test]
pytest
```