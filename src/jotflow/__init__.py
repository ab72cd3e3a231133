"""
Jotflow

Turns a free-form utterance into structured tasks and notes.
"""

__version__ = "0.1.0"
