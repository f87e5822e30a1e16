import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

# Reference data is hosted as static JSON next to the hosted front end.
DEFAULT_ORACLE_CARDS_SOURCE = "https://tkyano.github.io/csce242/projects/part7/json/oracle-cards.json"
DEFAULT_FEATURED_DECKS_SOURCE = "https://tkyano.github.io/csce242/projects/part7/json/featured-decks.json"

DEFAULT_STATIC_DIR = Path(__file__).parent / "public"

DECK_STORE_BACKENDS = ("memory", "json", "sqlite")


@dataclass
class Settings:
    env: str = "dev"
    host: str = "0.0.0.0"
    port: int = 3000
    deck_store: str = "json"
    deck_data_dir: Path = Path("data/decks")
    deck_db_path: Path = Path("data/decks.db")
    oracle_cards_source: str = DEFAULT_ORACLE_CARDS_SOURCE
    featured_decks_source: str = DEFAULT_FEATURED_DECKS_SOURCE
    reference_timeout: float = 10.0
    static_dir: Path = DEFAULT_STATIC_DIR
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        if self.deck_store not in DECK_STORE_BACKENDS:
            raise ValueError(
                f"Unknown DECK_STORE '{self.deck_store}'. Expected one of {DECK_STORE_BACKENDS}"
            )


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        env=os.getenv("ENV", "dev"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        deck_store=os.getenv("DECK_STORE", "json").lower(),
        deck_data_dir=Path(os.getenv("DECK_DATA_DIR", "data/decks")),
        deck_db_path=Path(os.getenv("DECK_DB_PATH", "data/decks.db")),
        oracle_cards_source=os.getenv("ORACLE_CARDS_SOURCE", DEFAULT_ORACLE_CARDS_SOURCE),
        featured_decks_source=os.getenv("FEATURED_DECKS_SOURCE", DEFAULT_FEATURED_DECKS_SOURCE),
        reference_timeout=float(os.getenv("REFERENCE_TIMEOUT", "10")),
        static_dir=Path(os.getenv("STATIC_DIR", str(DEFAULT_STATIC_DIR))),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
