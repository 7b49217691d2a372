[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wirekit"
version = "0.1.0"
description = "Offline pcap traffic summaries and a small TCP QR-code decoding client and server"
requires-python = ">=3.10"
dependencies = []
keywords = ["pcap", "ethernet", "arp", "udp", "qr", "network", "monitoring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wireview = "wirekit.wireview:main"
qrserver = "wirekit.qrserver:main"
qrclient = "wirekit.qrclient:main"

[tool.hatch.build.targets.wheel]
packages = ["wirekit"]

[tool.pytest.ini_options]
addopts = "-ra"
