"""Pcap capture summaries, and a TCP client and server for decoding QR-code images."""

__version__ = "0.1.0"