from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CommandTable"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    scryfall_timeout: float = 30.0

    # Scryfall /cards/collection accepts at most 75 identifiers per request
    scryfall_batch_size: int = 75

    # Scryfall asks for 50-100ms between requests
    scryfall_rate_limit_delay: float = 0.1

    # Websocket relay base URL (e.g. "ws://localhost:8000").
    # Empty means no broadcast channel: multiplayer degrades to solo play.
    relay_url: str = ""

    # Seconds a lobby client listens for player_join replies after a presence_ping
    lobby_discovery_window: float = 1.0

    # When True, player_state messages older than the last applied one for a
    # seat are dropped. Default False keeps last-applied-wins.
    reject_stale_player_state: bool = False


settings = Settings()


# =============================================================================
# GAME CONSTANTS
# =============================================================================

# Commander starting life total
STARTING_LIFE = 40

OPENING_HAND_SIZE = 7

# Undo/redo depth (past and future stacks are each capped)
MAX_HISTORY = 50

# Entries kept in the game log
MAX_LOG_ENTRIES = 100
