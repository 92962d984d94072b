"""
Share card rendering for blog posts.

Modules:
- core: compositing pipeline (framebuffer -> JPEG) and share card orchestration
- convert: parallel un-premultiply of ARGB words into RGB bytes
- encode: JPEG encoding into an arbitrary sink
- framebuffer: packed premultiplied ARGB framebuffer
- fetch: blog post and thumbnail download
- render: background, thumbnail, gradient wash and title drawing
- errors: exception types
"""
