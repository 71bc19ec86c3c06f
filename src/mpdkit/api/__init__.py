"""Asyncio client for the MPD text protocol.

Modules:
    codec: Command escaping and framing.
    connection: One TCP session with handshake and read primitives.
    protocol: Response parsing into models.
    client, command, idle, artwork: Typed operations per connection mode.
"""
