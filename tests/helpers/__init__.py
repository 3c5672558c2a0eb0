"""Test helpers package."""

from tests.helpers.channels import ScriptedChannel, scripted_channel_type
from tests.helpers.servers import RecordedRequest, UnixHttpServer, http_response

__all__ = [
    "RecordedRequest",
    "ScriptedChannel",
    "UnixHttpServer",
    "http_response",
    "scripted_channel_type",
]
