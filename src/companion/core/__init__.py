"""Core business logic.

Modules:
- curriculum: Curriculum note catalog and repositories
- note_matcher: Classification -> curriculum note matching
- progress_store: Storage port for the device-local progress record
- streak_tracker: Practice recording and streak calculation
- curriculum_qa: classify -> match notes -> answer pipeline
- math_explainer: Step-by-step math explanations with practice quiz
- translator: English -> Kannada translation with moderation
- question_summary: Parent-facing summary of asked questions
- scope_filter: Curriculum relevance checks for incoming prompts
"""

__all__ = [
    "curriculum",
    "note_matcher",
    "progress_store",
    "streak_tracker",
    "curriculum_qa",
    "math_explainer",
    "translator",
    "question_summary",
    "scope_filter",
]
