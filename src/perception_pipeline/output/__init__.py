"""
Output channels for published records.
"""

from .channels import CallbackChannel, OutputChannels, RecordChannel
from .frame_writer import AnnotatedFrameWriter
from .json_writer import JsonlRecordWriter

__all__ = [
    "AnnotatedFrameWriter",
    "CallbackChannel",
    "JsonlRecordWriter",
    "OutputChannels",
    "RecordChannel",
]
