"""Sample log decoding."""

from .decoder import FrameDecoder, DecoderStats, decode_bytes, MARKER, ADDRESS_SIZE

__all__ = ['FrameDecoder', 'DecoderStats', 'decode_bytes', 'MARKER', 'ADDRESS_SIZE']
