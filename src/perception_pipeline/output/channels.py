"""
Output channels - where formatted records are published.

Defines the interface a transport must satisfy so the pipeline never depends
on a particular publish/subscribe mechanism. A multiprocessing.Queue, a
JSONL writer or a callback adapter all work.

Usage:
    channels = OutputChannels(
        visual=AnnotatedFrameWriter("output_frames"),
        p2=CallbackChannel(publish_detection),
    )
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

# output kind -> OutputChannels attribute
KIND_CHANNELS = {
    "visualization": "visual",
    "classification": "p1",
    "detection": "p2",
    "segmentation": "p3",
    "localization": "localize",
}


@runtime_checkable
class RecordChannel(Protocol):
    """Protocol for output channel implementations."""

    def put(self, record: Any) -> None:
        """
        Publish a record.

        Args:
            record: Output record to publish
        """
        ...


class CallbackChannel:
    """
    Adapter that wraps a callback function as a RecordChannel.

    Example:
        def publish(record):
            client.send(record.to_dict())

        channel = CallbackChannel(publish)
        channel.put(record)  # Calls publish
    """

    def __init__(self, callback):
        """
        Create adapter from callback function.

        Args:
            callback: Function that accepts a record
        """
        self._callback = callback

    def put(self, record: Any) -> None:
        """Forward record to callback."""
        self._callback(record)


@dataclass
class OutputChannels:
    """
    One optional channel per output kind.

    Attributes:
        visual: Annotated images (visualize mode, any precision level or route)
        p1: Precision level 1 classification records
        p2: Precision level 2 detection records
        p3: Precision level 3 detection + mask records
        localize: Localization records
    """

    visual: RecordChannel | None = None
    p1: RecordChannel | None = None
    p2: RecordChannel | None = None
    p3: RecordChannel | None = None
    localize: RecordChannel | None = None

    def for_kind(self, kind: str) -> RecordChannel | None:
        """
        Channel that carries records of an output kind.

        Args:
            kind: OutputKind member or its string value
        """
        return getattr(self, KIND_CHANNELS[getattr(kind, "value", kind)])

    @classmethod
    def broadcast(cls, channel: RecordChannel) -> "OutputChannels":
        """Route every output kind to the same channel."""
        return cls(
            visual=channel, p1=channel, p2=channel, p3=channel, localize=channel
        )
