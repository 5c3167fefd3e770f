"""Telegram photo search bot backed by the Flickr search API."""

__version__ = "0.1.0"
