"""Test package for the Attrangi client.

Structure:
    - unit/: Individual components with gateway doubles and a virtual clock
    - integration/: Client components against the in-memory reference backend

Leverages pytest with pytest-asyncio for coroutines and pytest-check for
soft assertions.
"""
