"""Durmah relay gateway: Socket.IO relay plus realtime-session and TTS proxies."""

__version__ = "0.1.0"
