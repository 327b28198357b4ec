"""World aggregate: the one owner of every live entity.

Nothing else in the package keeps entity collections. Entities die by being
marked inactive; compact() drops them once at the end of a tick.
"""

from typing import List, Optional

from .config import GameConfig, StageConfig
from .entities import Block, Enemy, Item, Player, Projectile


class World:
    """Entity registry for one game session.

    Holds the Player singleton plus the enemy, block, item and projectile
    collections and the background scroll offset.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.player = Player(self.config.player, self.config.timing, self.config.world)
        self.enemies: List[Enemy] = []
        self.blocks: List[Block] = []
        self.items: List[Item] = []
        self.projectiles: List[Projectile] = []
        self.background_x = 0.0

    @property
    def width(self) -> float:
        return self.config.world.width

    @property
    def height(self) -> float:
        return self.config.world.height

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_enemy(self, enemy: Enemy) -> Enemy:
        self.enemies.append(enemy)
        return enemy

    def add_block(self, block: Block) -> Block:
        self.blocks.append(block)
        return block

    def add_item(self, item: Item) -> Item:
        self.items.append(item)
        return item

    def add_projectile(self, projectile: Projectile) -> Projectile:
        self.projectiles.append(projectile)
        return projectile

    def compact(self) -> int:
        """Drop inactive entities. Returns how many were removed."""
        before = self.entity_count
        self.enemies = [e for e in self.enemies if e.active]
        self.blocks = [b for b in self.blocks if b.active]
        self.items = [i for i in self.items if i.active]
        self.projectiles = [p for p in self.projectiles if p.active]
        return before - self.entity_count

    @property
    def entity_count(self) -> int:
        """Number of non-player entities."""
        return len(self.enemies) + len(self.blocks) + len(self.items) + len(self.projectiles)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def collidable_blocks(self) -> List[Block]:
        return [b for b in self.blocks if b.collidable]

    def rightmost_block(self) -> Optional[Block]:
        live = [b for b in self.blocks if b.active]
        if not live:
            return None
        return max(live, key=lambda b: b.right)

    # ------------------------------------------------------------------
    # Board resets
    # ------------------------------------------------------------------

    def clear_board(self) -> None:
        """Remove every non-player entity and rewind the background."""
        self.enemies = []
        self.blocks = []
        self.items = []
        self.projectiles = []
        self.background_x = 0.0

    def seed_blocks(self, stage: StageConfig) -> None:
        """Place the stage's opening platforms (replaces existing blocks)."""
        block_height = self.config.spawn.block_height
        self.blocks = [
            Block(x=x, y=self.height - rise, width=width, height=block_height)
            for x, rise, width in stage.initial_blocks
        ]

    def reset_board(self, stage: StageConfig) -> None:
        """Fresh board for a stage: cleared entities, seeded blocks, player reset."""
        self.clear_board()
        self.seed_blocks(stage)
        self.player.reset()
