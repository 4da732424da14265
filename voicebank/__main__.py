"""Module entrypoint for running Voicebank as ``python -m voicebank``."""

from __future__ import annotations

from voicebank.cli import main


if __name__ == "__main__":
    main()
