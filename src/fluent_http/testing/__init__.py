"""Fake transport, call log and assertions for testing code that uses fluent-http."""

from .assertion import HttpCallAssertion
from .http_test import CannedResponse, HttpTest

__all__ = ["CannedResponse", "HttpCallAssertion", "HttpTest"]
