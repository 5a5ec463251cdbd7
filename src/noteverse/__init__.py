"""
NoteVerse Backend - Academic Note Sharing Platform

Students upload, browse and share notes organised by branch, year and subject,
with PDF attachments, likes and per-note privacy.

Version: 1.0.0
"""

__version__ = "1.0.0"
