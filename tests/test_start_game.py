"""Tests for setup defaults and setup validation."""

import pytest

from app.config import get_settings
from app.schemas.game_engine import PlayerSetup
from app.services.game.start_game import (
    PLAYER_COLORS,
    default_player_setups,
    validate_game_settings,
)

from .conftest import create_setup


class TestDefaultPlayerSetups:
    """Tests for default_player_setups helper function."""

    def test_builds_defaults_for_two_players(self) -> None:
        """Should name seats in order and hand out colours by seat."""
        setups = default_player_setups(2)

        assert [s.id for s in setups] == [0, 1]
        assert [s.name for s in setups] == ["Player 1", "Player 2"]
        assert [s.color for s in setups] == PLAYER_COLORS[:2]
        assert all(s.avatar_ref == "" for s in setups)

    def test_colours_are_distinct(self) -> None:
        """Every seat gets its own colour."""
        setups = default_player_setups(len(PLAYER_COLORS))
        assert len({s.color for s in setups}) == len(PLAYER_COLORS)

    @pytest.mark.parametrize("num_players", [0, len(PLAYER_COLORS) + 1])
    def test_rejects_impossible_tables(self, num_players: int) -> None:
        """Seat counts outside the palette are refused."""
        with pytest.raises(ValueError, match="Cannot seat"):
            default_player_setups(num_players)


class TestValidateGameSettings:
    """Tests for validate_game_settings."""

    def test_accepts_valid_setup(self, two_setups: list[PlayerSetup]) -> None:
        """Two named players with their own avatars can start."""
        validate_game_settings(two_setups)

    def test_rejects_too_few_players(self) -> None:
        """A single seat is below the minimum."""
        with pytest.raises(ValueError, match="minimum of 2 players"):
            validate_game_settings([create_setup(0, "Alice")])

    def test_rejects_too_many_players(self) -> None:
        """More seats than MAX_PLAYERS are refused."""
        setups = [create_setup(i) for i in range(get_settings().MAX_PLAYERS + 1)]
        with pytest.raises(ValueError, match="maximum of 10 players"):
            validate_game_settings(setups)

    def test_rejects_blank_name(self) -> None:
        """Whitespace-only names are refused."""
        setups = [create_setup(0, "Alice"), create_setup(1, "   ")]
        with pytest.raises(ValueError, match="Please enter a name for each player."):
            validate_game_settings(setups)

    def test_rejects_missing_avatar(self) -> None:
        """Every player needs an avatar."""
        bob = create_setup(1, "Bob").model_copy(update={"avatar_ref": ""})
        with pytest.raises(ValueError, match="Please select an avatar for Bob."):
            validate_game_settings([create_setup(0, "Alice"), bob])

    def test_rejects_shared_avatar(self) -> None:
        """Two players cannot share an avatar."""
        bob = create_setup(1, "Bob").model_copy(update={"avatar_ref": "avatar-0"})
        with pytest.raises(ValueError, match="Duplicate avatar found"):
            validate_game_settings([create_setup(0, "Alice"), bob])

    def test_rejects_duplicate_ids(self) -> None:
        """Two players cannot share an id."""
        with pytest.raises(ValueError, match="Duplicate player ID found: 0"):
            validate_game_settings(
                [create_setup(0, "Alice"), create_setup(0, "Bob").model_copy(update={"avatar_ref": "x"})]
            )

    def test_minimum_follows_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """MIN_PLAYERS from the environment lowers the minimum."""
        monkeypatch.setenv("MIN_PLAYERS", "1")
        get_settings.cache_clear()

        validate_game_settings([create_setup(0, "Solo")])
