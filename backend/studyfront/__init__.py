"""StudyFront Application Package — campus Q&A, study quizzes and marketplace backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
