"""Providers that carry request envelopes to a node."""

from .base import Provider
from .http_provider import HttpProvider
