"""NiceGUI interface - thin visualization layer over the Orchestrator.

Responsibilities:
    - Onboarding wizard screens
    - Chat bubbles with staged phase reveal and simulated typing
    - Session list, reset and summary dialog

Contains no business logic. Every decision is delegated to the Orchestrator.
"""
