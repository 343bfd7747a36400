"""State/store layer.

This package owns the local quote collection, its durable backends and the
pure merge that reconciles it with a remote snapshot.
"""
