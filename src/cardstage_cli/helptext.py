HELP_TEXT = r'''
Cardstage CLI

This tool computes 3D card layouts and the eased transitions between them.
Nothing is rendered unless you ask for the visualizer (`cardstage view`).

Quick start

  # install (dev)
  python3 -m venv .venv
  source .venv/bin/activate
  pip install -U pip
  pip install -e .

  # list the layouts
  cardstage schemes

  # print the sphere targets for 12 cards
  cardstage layout sphere --count 12

  # simulate table -> sphere -> helix without a window
  cardstage animate table sphere helix --count 60

  # open the 3D viewer with people from a CSV export
  cardstage view --csv people.csv

Core ideas
- Each card has one pose: a position and three rotation angles (radians).
- A layout maps N cards to N target poses (table and grid hold at most 200;
  extra cards keep their pose).
- Switching layout starts a fresh batch of transitions from wherever the cards
  are right now, so an interrupted animation never jumps.
- Motion uses an exponential ease-in-out: slow, very fast, slow.

Local storage
- Config: ~/.cardstage/config.json

Environment variables
- CARDSTAGE_HOME: override ~/.cardstage
- CARDSTAGE_CONFIG_PATH: override the config.json path (useful for tests)

Commands (high-level)
- cardstage schemes
- cardstage layout <scheme> (--count N | --csv <path|url>) [--json] [--limit N]
- cardstage pose <scheme> <index> (--count N | --csv <path|url>)
- cardstage animate <scheme>... (--count N | --csv <path|url>) [--frame-ms MS] [--interrupt-at F]
- cardstage view (--count N | --csv <path|url>)
- cardstage config show
- cardstage config duration <scheme> <ms>
- cardstage config reset
'''
