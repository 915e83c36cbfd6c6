"""Generation session lifecycle."""
from md2pdf.sessions.manager import GenerationSession, SessionState

__all__ = ["GenerationSession", "SessionState"]
