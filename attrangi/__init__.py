"""Attrangi client - staged-reveal chat front-end for a conversational backend.

Walks a new user through a short onboarding questionnaire, persists and
resumes chat sessions, and presents assistant replies in timed phases.

Components:
    - models: Profile, message and wire schemas
    - onboarding: Step-by-step profile collection
    - session: Locally persisted session identifiers and titles
    - conversation: Ordered message log
    - reveal: Phased reveal and simulated typing
    - gateway: HTTP client for the conversational backend
    - orchestrator: Mode switching and send/receive flow
    - ui: NiceGUI interface
    - api: In-memory reference backend for local development
"""

__version__ = "0.1.0"
