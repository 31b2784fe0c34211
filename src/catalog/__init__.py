"""Namespace catalog layer.

This package keeps the bucket/object registry over the flat content store.
It owns the data model, the operation surface and catalog persistence.
"""
