"""
Moodlog services.

Each service is constructed once at startup around a QueryEngine and
holds no per-request state.
"""
