"""
Core functionality for the YouTube transcript chat application.

This package contains modules for fetching captions, formatting and
searching transcripts, and managing grounded chat sessions.
"""
