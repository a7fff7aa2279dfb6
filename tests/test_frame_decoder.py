#!/usr/bin/env python3
"""
Unit tests for the sample log frame decoder

Covers well-formed logs, noise between frames, truncated trailing frames and
frames that are not terminated by a marker or end of stream.
"""

import io
import unittest

from fcprofiler.log.decoder import FrameDecoder, decode_bytes

from helpers import make_frame, make_log


class TestWellFormedLogs(unittest.TestCase):
    """Logs made only of valid frames"""

    def test_empty_stream(self):
        """Empty input yields no samples"""
        self.assertEqual(decode_bytes(b''), [])

    def test_two_frames(self):
        """Two back-to-back frames decode to both addresses"""
        data = bytes([0x3E, 0x01, 0x00, 0x00, 0x00, 0x3E, 0x02, 0x00, 0x00, 0x00])
        self.assertEqual(decode_bytes(data), [1, 2])

    def test_little_endian_address(self):
        """Address bytes are little-endian"""
        data = b'>' + bytes([0x78, 0x56, 0x34, 0x12])
        self.assertEqual(decode_bytes(data), [0x12345678])

    def test_frame_count_matches(self):
        """Every well-formed frame is decoded, in order"""
        pcs = [0x08000000 + i * 4 for i in range(200)] + [0, 0xFFFFFFFF]
        self.assertEqual(decode_bytes(make_log(pcs)), pcs)

    def test_marker_bytes_inside_address(self):
        """A 0x3E byte inside the address is data, not a new frame"""
        pc = 0x3E3E3E3E
        self.assertEqual(decode_bytes(make_log([pc, 7])), [pc, 7])

    def test_small_chunks(self):
        """Frames split across read chunks decode the same way"""
        pcs = [0x08001234, 0x3E000001, 0x0800ABCD]
        decoder = FrameDecoder(chunk_size=3)
        samples = list(decoder.iter_samples(io.BytesIO(make_log(pcs))))
        self.assertEqual(samples, pcs)
        self.assertEqual(decoder.stats.frames, 3)


class TestNoiseHandling(unittest.TestCase):
    """Garbage bytes and malformed frames"""

    def test_leading_garbage_skipped(self):
        """Bytes before the first marker are ignored"""
        data = b'\x00\xff\x10abc' + make_log([5, 6])
        self.assertEqual(decode_bytes(data), [5, 6])

    def test_garbage_between_frames_discards_previous_frame(self):
        """A frame followed by a stray byte is dropped"""
        data = bytes([0x3E, 0x01, 0x00, 0x00, 0x00, 0xFF, 0x3E, 0x02, 0x00, 0x00, 0x00])
        decoder = FrameDecoder()
        samples = list(decoder.iter_samples(io.BytesIO(data)))
        self.assertEqual(samples, [2])
        self.assertEqual(decoder.stats.discarded, 1)

    def test_garbage_before_each_marker(self):
        """Non-marker noise in front of a frame only costs the frame before it"""
        data = make_frame(1) + make_frame(2) + b'\x00\x01' + make_frame(3)
        self.assertEqual(decode_bytes(data), [1, 3])

    def test_noise_after_last_frame(self):
        """Trailing garbage after the final frame drops that frame"""
        data = make_log([1, 2]) + b'\x00'
        self.assertEqual(decode_bytes(data), [1])


class TestTruncation(unittest.TestCase):
    """Frames cut short at the end of the log"""

    def test_stream_ends_on_marker(self):
        """A lone marker at end of stream yields nothing"""
        decoder = FrameDecoder()
        self.assertEqual(list(decoder.iter_samples(io.BytesIO(b'>'))), [])
        self.assertEqual(decoder.stats.truncated, 1)

    def test_partial_address(self):
        """Fewer than 4 address bytes after the marker yields nothing"""
        for tail in (b'', b'\x01', b'\x01\x02', b'\x01\x02\x03'):
            with self.subTest(tail=tail):
                self.assertEqual(decode_bytes(b'>' + tail), [])

    def test_truncated_frame_keeps_previous(self):
        """A truncated trailing frame still terminates the frame before it"""
        data = make_frame(9) + b'>\x01\x02'
        self.assertEqual(decode_bytes(data), [9])


class TestGeneratorBehaviour(unittest.TestCase):
    """The decoder is a lazy, single-use sequence"""

    def test_lazy_reading(self):
        """Samples are produced before the stream is fully read"""
        stream = io.BytesIO(make_log(range(10000)))
        samples = FrameDecoder(chunk_size=64).iter_samples(stream)
        self.assertEqual(next(samples), 0)
        self.assertLess(stream.tell(), len(stream.getvalue()))

    def test_not_restartable(self):
        """A consumed generator stays exhausted"""
        samples = FrameDecoder().iter_samples(io.BytesIO(make_log([1, 2])))
        self.assertEqual(list(samples), [1, 2])
        self.assertEqual(list(samples), [])


if __name__ == '__main__':
    unittest.main()
