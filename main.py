"""Entry point for offline pose decoding and gesture replay."""

import sys
from pathlib import Path

from dotenv import load_dotenv

from pose_module.cli import main as cli_main


def _load_env_files() -> None:
    """Load .env files from the working directory and the repo root."""
    candidates = [Path.cwd() / "env/.env", Path.cwd() / ".env"]
    module_root = Path(__file__).resolve().parent
    candidates.extend([module_root / "env/.env", module_root / ".env"])
    for path in candidates:
        if path.exists():
            load_dotenv(dotenv_path=str(path), override=False)


def bootstrap(argv: list[str] | None = None) -> int:
    _load_env_files()
    return cli_main(argv)


if __name__ == "__main__":
    raise SystemExit(bootstrap(sys.argv[1:]))
