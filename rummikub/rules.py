from dataclasses import dataclass


@dataclass(frozen=True)
class Ruleset:
    num_players: int = 4
    colors: int = 4
    values: int = 13
    copies_per_tiletype: int = 2
    num_jokers: int = 2
    initial_hand_size: int = 14
    initial_meld_min_points: int = 30
    min_set_size: int = 3
    max_group_size: int = 4

    def deck_size(self) -> int:
        normal_tiles = self.colors * self.values * self.copies_per_tiletype
        return normal_tiles + self.num_jokers


DEFAULT_RULES = Ruleset()
