"""
Quillpress Modules
==================

Feature blueprints: auth, posts, tags, newsletter, upload, documentation, ops.
"""

__all__ = ['auth', 'posts', 'tags', 'newsletter', 'upload', 'documentation', 'ops']
