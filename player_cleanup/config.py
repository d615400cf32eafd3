"""
Cleanup configuration

Values come from the environment (or a .env file):
    CLEANUP_DRY_RUN=false           enable destructive deletes
    CLEANUP_TEAM_SIMILARITY_THRESHOLD=0.8
    SUPABASE_URL / SUPABASE_KEY     player store credentials
"""
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

load_dotenv()


ALL_PHASES = [1, 2, 3, 4]


class CleanupConfig(BaseSettings):
    """Duplicate cleanup settings"""

    # Destructive-run gate. Nothing is deleted unless this is explicitly False.
    dry_run: bool = Field(default=True, description="Report planned removals without deleting")

    # Phase 1: abbreviated vs full name
    abbreviated_max_age_diff: int = Field(default=1, description="Age window for abbreviated-name matches")

    # Phase 2: same team
    team_similarity_threshold: float = Field(default=0.8, description="Name similarity must exceed this")
    team_max_age_diff: int = Field(default=1, description="Maximum age difference")

    # Phase 3: same surname (stricter)
    surname_similarity_threshold: float = Field(default=0.9, description="Name similarity must exceed this")
    surname_max_age_diff: int = Field(default=0, description="Maximum age difference")
    surname_group_min: int = Field(default=2, description="Smallest surname group considered")
    surname_group_max: int = Field(default=5, description="Largest surname group considered")

    enabled_phases: List[int] = Field(default_factory=lambda: list(ALL_PHASES), description="Phases to run")

    @field_validator("team_similarity_threshold", "surname_similarity_threshold")
    @classmethod
    def _check_threshold(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("similarity threshold must be within [0, 1]")
        return value

    @field_validator("enabled_phases")
    @classmethod
    def _check_phases(cls, value: List[int]) -> List[int]:
        unknown = [p for p in value if p not in ALL_PHASES]
        if unknown:
            raise ValueError(f"unknown phases: {unknown}")
        return sorted(set(value))

    class Config:
        env_prefix = "CLEANUP_"
        case_sensitive = False


class SupabaseConfig(BaseSettings):
    """Supabase settings"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase service key")
    players_table: str = Field(default="players", description="Player records table")
    page_size: int = Field(default=1000, description="Rows per paginated read")

    class Config:
        env_prefix = ""
        case_sensitive = False


def parse_phases(value: str) -> List[int]:
    """Parse a "1,2,4" style phase list"""
    phases = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise ValueError(f"invalid phase: {part!r}")
        phases.append(int(part))
    return phases
