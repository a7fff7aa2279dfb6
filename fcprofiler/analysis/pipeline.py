#!/usr/bin/env python3
"""
Bounded channel between the frame decoder and its consumer.

The decoder runs in its own thread and pushes samples into a bounded queue;
the consumer iterates the channel in stream order. Completion is signalled
by a dedicated sentinel object rather than a reserved address, since 0 is a
valid program counter.
"""

import queue
import logging
import threading
from typing import BinaryIO, Iterator

from ..core.config import ProfilerConfig, DEFAULT_QUEUE_SIZE
from ..core.exceptions import LogReadError
from ..log.decoder import FrameDecoder

logger = logging.getLogger(__name__)


class _EndOfStream:  # pylint: disable=too-few-public-methods
    """Marks the end of the sample sequence"""

    def __repr__(self):
        return 'END_OF_STREAM'


END_OF_STREAM = _EndOfStream()


class _ProducerFailure:  # pylint: disable=too-few-public-methods
    """Carries an exception raised in the producer thread to the consumer"""

    def __init__(self, error: BaseException):
        self.error = error


class SampleChannel:
    """Bounded, blocking queue of samples terminated by END_OF_STREAM"""

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE):
        self._queue = queue.Queue(maxsize=maxsize)

    def put(self, sample: int) -> None:
        """Send one sample, blocking while the channel is full."""
        self._queue.put(sample)

    def close(self) -> None:
        """Signal that no more samples will be sent."""
        self._queue.put(END_OF_STREAM)

    def fail(self, error: BaseException) -> None:
        """Terminate the channel with an error for the consumer to re-raise."""
        self._queue.put(_ProducerFailure(error))

    def __iter__(self) -> Iterator[int]:
        while True:
            item = self._queue.get()
            if item is END_OF_STREAM:
                return
            if isinstance(item, _ProducerFailure):
                raise LogReadError(f"Failed to read profile log: {item.error}") from item.error
            yield item


def _produce(stream: BinaryIO, decoder: FrameDecoder, channel: SampleChannel) -> None:
    """Thread body: decode the whole stream into the channel."""
    try:
        for sample in decoder.iter_samples(stream):
            channel.put(sample)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug("Decoder thread stopped: %s", e)
        channel.fail(e)
        return
    channel.close()


def start_decoder(stream: BinaryIO, config: ProfilerConfig,
                  decoder: FrameDecoder = None) -> SampleChannel:
    """Start decoding ``stream`` in a background thread.

    Args:
        stream: Open binary log stream; the caller keeps ownership
        config: Run configuration (only ``queue_size`` is used)
        decoder: Decoder instance, for callers that want its stats afterwards

    Returns:
        SampleChannel to iterate for the decoded samples
    """
    channel = SampleChannel(config.queue_size)
    decoder = decoder or FrameDecoder()
    thread = threading.Thread(
        target=_produce,
        args=(stream, decoder, channel),
        name='frame-decoder',
        daemon=True,
    )
    thread.start()
    return channel
