"""Release flow.

- changelog: latest entry of the changelog
- builder: Go cross-compilation driver
- gh: GitHub release operations
- sequencer: ordered, fail-fast release steps
"""

from __future__ import annotations
