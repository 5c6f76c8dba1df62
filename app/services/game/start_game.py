from app.config import get_settings
from app.schemas.game_engine import PlayerSetup

# One colour per seat, in seat order
PLAYER_COLORS = [
    "#CF2A2A",
    "#1E459F",
    "#2E8B57",
    "#FABD32",
    "#8E44AD",
    "#E67E22",
    "#16A085",
    "#D35400",
    "#C0392B",
    "#2C3E50",
]


def default_player_setups(num_players: int) -> list[PlayerSetup]:
    """Build the setup screen's defaults for a table of num_players.

    Avatars are left empty; every seat must pick one before the game starts.
    """
    if not 1 <= num_players <= len(PLAYER_COLORS):
        raise ValueError(f"Cannot seat {num_players} players.")
    return [
        PlayerSetup(
            id=i,
            name=f"Player {i + 1}",
            color=PLAYER_COLORS[i],
            avatar_ref="",
        )
        for i in range(num_players)
    ]


def validate_game_settings(players: list[PlayerSetup]) -> None:
    """Validate the seated players before starting a game.

    Raises:
        ValueError: If the seat count is out of range, a name is blank, or an
            id or avatar is used twice.
    """
    settings = get_settings()
    if len(players) < settings.MIN_PLAYERS:
        raise ValueError(
            f"A minimum of {settings.MIN_PLAYERS} players is required to start the game."
        )
    if len(players) > settings.MAX_PLAYERS:
        raise ValueError(f"A maximum of {settings.MAX_PLAYERS} players can play.")

    player_ids: set[int] = set()
    avatars: set[str] = set()
    for player in players:
        if not player.name.strip():
            raise ValueError("Please enter a name for each player.")
        if not player.avatar_ref:
            raise ValueError(f"Please select an avatar for {player.name}.")
        if player.id in player_ids:
            raise ValueError(f"Duplicate player ID found: {player.id}")
        if player.avatar_ref in avatars:
            raise ValueError(f"Duplicate avatar found: {player.avatar_ref}")
        player_ids.add(player.id)
        avatars.add(player.avatar_ref)
