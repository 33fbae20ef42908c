"""
Runtime settings for the burritos webapp.

Values come from the environment (a ``.env`` file is loaded by ``main.py``):

- MAIN_DIR: root of the dated data tree
- ANALYSIS_DIR: root holding ``configurations/`` and the analysis script
- PYTHON_PATH: interpreter used to run the analysis script
- ANALYSIS_SCRIPT: script re-run by ``/api/reanalyse``
- PORT: HTTP port
- JWT_SECRET, USER_LOGIN, USER_PASSWORD_HASH: single-user login
- LOG_LEVEL: logging level name
"""

import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

DEFAULT_MAIN_DIR = "/home/alpha/Desktop/eos"
DEFAULT_PORT = 3001


@dataclass
class Settings:
    main_dir: Path
    analysis_dir: Path
    python_path: str
    analysis_script: Path
    port: int = DEFAULT_PORT
    jwt_secret: Optional[str] = None
    user_login: Optional[str] = None
    user_password_hash: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        main_dir = Path(os.environ.get("MAIN_DIR", DEFAULT_MAIN_DIR))
        analysis_dir = Path(os.environ.get("ANALYSIS_DIR", str(main_dir / "analysis")))
        return cls(
            main_dir=main_dir,
            analysis_dir=analysis_dir,
            python_path=os.environ.get("PYTHON_PATH", sys.executable),
            analysis_script=Path(os.environ.get("ANALYSIS_SCRIPT", str(analysis_dir / "analysis.py"))),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            jwt_secret=os.environ.get("JWT_SECRET") or None,
            user_login=os.environ.get("USER_LOGIN") or None,
            user_password_hash=os.environ.get("USER_PASSWORD_HASH") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )

    @property
    def auth_enabled(self) -> bool:
        """Login is enforced only when all three credentials are configured."""
        return bool(self.jwt_secret and self.user_login and self.user_password_hash)


@lru_cache
def get_settings() -> Settings:
    """FastAPI dependency; tests replace it through ``app.dependency_overrides``."""
    return Settings.from_env()
