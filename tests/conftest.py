"""
Shared test setup.

The web app reads its session secret at import time; pin it so importing
the app never writes a key file into the working directory.
"""
import os

os.environ.setdefault("SESSION_SECRET", "test-session-secret")
