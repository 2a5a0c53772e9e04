"""Module entrypoint for running SpeakGenie as ``python -m speakgenie``."""

from __future__ import annotations

from speakgenie.cli import main


if __name__ == "__main__":
    main()
