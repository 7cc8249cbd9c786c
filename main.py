from __future__ import annotations

from chaincfg.runtime.lifecycle import main


if __name__ == "__main__":
    raise SystemExit(main())
