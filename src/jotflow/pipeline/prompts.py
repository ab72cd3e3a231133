"""
Instruction prompts for every inference call in the pipeline.
"""

from __future__ import annotations

from datetime import datetime

CLASSIFY = """You are a text classifier that determines if the input text is a task, a note, or both.

Classification rules:
- TASK: Contains actionable items: meetings, calls, reminders, deadlines, to-dos, assignments, goals
- NOTE: Purely informational: ideas, observations, references, documentation
- BOTH: Contains an actionable item AND informational content worth keeping on its own

Examples:
- "Call the dentist tomorrow at 10" -> {"type": "task", "confidence": 0.95}
- "The wifi password at the office is on the fridge" -> {"type": "note", "confidence": 0.9}
- "Team sync moved to Friday; Anna said the Q3 numbers look 12% better than forecast" -> {"type": "both", "confidence": 0.85}

Respond with a JSON object (just the object, no other text) containing:
- "type": "task", "note", or "both"
- "confidence": number between 0 and 1 indicating classification confidence"""

STRUCTURE_TASK = """Transform the input into a clear and actionable task. Extract a title and determine priority/difficulty.

Rules:
- Title should be action-oriented and specific
- Content should include context and details
- Priority: LOW (routine), MEDIUM (normal), HIGH (urgent/important)
- Difficulty: 1-5 scale (1=easy, 5=very complex)

Respond with JSON: { "title": "...", "content": "...", "priority": "LOW|MEDIUM|HIGH", "difficulty": 1-5 }"""

STRUCTURE_NOTE = """Transform the input into a well-structured note. Extract a clear title and organize the content logically.

Rules:
- Title should be concise and descriptive
- Content should preserve all important information
- Organize content in a logical structure
- Keep the original meaning and context

Respond with JSON: { "title": "...", "content": "..." }"""

TASK_CATEGORIES = """You are an assistant that extracts relevant categories (keywords) for a given task description.
Return 2-5 short, general, lowercase categories in English (e.g. "work", "meeting", "finance", "health", "project", "learning", "personal", "shopping", "deadline", "call", "email").
Respond with a JSON array of strings, no other text."""

NOTE_CATEGORIES = """You are an assistant that extracts relevant categories (keywords) for a given note content.
Return 2-5 short, general, lowercase categories in English (e.g. "work", "ideas", "learning", "personal", "project", "reference", "health", "finance", "travel", "shopping").
Respond with a JSON array of strings, no other text."""

STEPS = """Break the task into a short ordered list of concrete sub-steps someone could tick off one by one.
Use 2-7 steps. If the task is a single atomic action, return an empty list.
Respond with a JSON array of strings, no other text."""

DIFFICULTY = """Rate how hard the task is on a scale from 1 to 5 (1=trivial, 3=normal effort, 5=very complex).
Respond with a single digit and nothing else."""

_DUE_TIME = """Find the deadline or due time in the text, if there is one. The text may be in English or German.

Reference: now is {now} ({weekday}).

Rules:
- Resolve relative dates ("tomorrow", "morgen", "in 3 days", "in drei Tagen", "next week", "nächste Woche") to an absolute date using the reference.
- For a bare weekday ("by Friday", "bis Freitag") return only "weekday" with the English weekday name and leave "date" null.
- Use 24-hour time. Leave "time" null when no time of day is mentioned.
- If there is no deadline at all, return all fields as null.

Respond with JSON only: {{ "date": "YYYY-MM-DD" or null, "time": "HH:MM" or null, "weekday": "monday".."sunday" or null }}"""


def due_time_prompt(reference: datetime) -> str:
    """Due-time prompt anchored to a reference instant."""
    return _DUE_TIME.format(
        now=reference.strftime("%Y-%m-%d %H:%M"),
        weekday=reference.strftime("%A"),
    )
