"""Pygame 2D visualization for the zombie simulation.

Renders faction control, population density, and an optional scent
overlay in a window.  The simulation steps at a configurable tick rate
while the display refreshes at the Pygame frame rate.  The renderer only
reads published snapshots; it never touches simulation state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame
from numpy.typing import NDArray

from zombiegrid.scent.fields import ScentType
from zombiegrid.world.cell import Status

if TYPE_CHECKING:
    from zombiegrid.simulation.engine import SimulationEngine
    from zombiegrid.world.world import GridSnapshot

# Colour palette
_BG = (0, 0, 0)
_TEXT = (200, 200, 200)

# Faction colours at full population density
_STATUS_COLOURS: dict[Status, NDArray[np.float64]] = {
    Status.EMPTY: np.array([0, 0, 0], dtype=np.float64),
    Status.ZOMBIE: np.array([0, 255, 0], dtype=np.float64),
    Status.HUMAN: np.array([0, 0, 255], dtype=np.float64),
}

# Dimmest a held cell is drawn, so single survivors stay visible
_MIN_BRIGHTNESS = 0.35

# Scent overlay colours
_SCENT_COLOURS: dict[ScentType, NDArray[np.float64]] = {
    ScentType.HUMAN: np.array([120, 160, 255], dtype=np.float64),
    ScentType.ZOMBIE: np.array([200, 255, 80], dtype=np.float64),
}


def snapshot_colours(snapshot: GridSnapshot) -> NDArray[np.uint8]:
    """Map a snapshot to an RGB image of shape ``(height, width, 3)``.

    Each held cell uses its faction colour scaled by population relative
    to the busiest cell of that faction.
    """
    image = np.zeros((*snapshot.status.shape, 3), dtype=np.float64)
    for status in (Status.ZOMBIE, Status.HUMAN):
        mask = snapshot.status == status.value
        if not mask.any():
            continue
        pop = snapshot.population[mask].astype(np.float64)
        brightness = _MIN_BRIGHTNESS + (1.0 - _MIN_BRIGHTNESS) * pop / pop.max()
        image[mask] = brightness[:, None] * _STATUS_COLOURS[status]
    return image.astype(np.uint8)


class PygameRenderer:
    """Renders a SimulationEngine state into a Pygame window.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        0.5,
        1.0,
        3.0,
        5.0,
        10.0,
        15.0,
        30.0,
        60.0,
    ]

    # Overlay cycle for the S key
    _OVERLAYS: ClassVar[list[ScentType | None]] = [
        None,
        ScentType.HUMAN,
        ScentType.ZOMBIE,
    ]

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 4,
        ticks_per_second: float = 10.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0
        self._overlay_index = 0

        world = engine.current
        self._grid_w = world.width
        self._grid_h = world.height
        self._panel_width = 220
        self._win_w = world.width * cell_size + self._panel_width
        self._win_h = max(world.height * cell_size, 260)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Zombiegrid")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        best = 0
        best_diff = abs(self._SPEED_STEPS[0] - tps)
        for i, s in enumerate(self._SPEED_STEPS):
            diff = abs(s - tps)
            if diff < best_diff:
                best, best_diff = i, diff
        return best

    @property
    def overlay(self) -> ScentType | None:
        return self._OVERLAYS[self._overlay_index]

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.engine.step()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key == pygame.K_s:
                    self._overlay_index = (self._overlay_index + 1) % len(
                        self._OVERLAYS
                    )
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        snapshot = self.engine.snapshot()
        self.screen.fill(_BG)
        self._draw_grid(snapshot)
        if self.overlay is not None:
            self._draw_scent_overlay(snapshot, self.overlay)
        self._draw_info_panel()
        pygame.display.flip()

    def _blit_image(self, image: NDArray[np.uint8]) -> pygame.Surface:
        """Scale a ``(height, width, 3)`` image up to window cells."""
        # surfarray expects (width, height, 3)
        surface = pygame.surfarray.make_surface(image.transpose(1, 0, 2))
        return pygame.transform.scale(
            surface,
            (self._grid_w * self.cell_size, self._grid_h * self.cell_size),
        )

    def _draw_grid(self, snapshot: GridSnapshot) -> None:
        """Draw every cell in its faction colour."""
        self.screen.blit(self._blit_image(snapshot_colours(snapshot)), (0, 0))

    def _draw_scent_overlay(self, snapshot: GridSnapshot, kind: ScentType) -> None:
        """Draw one scent channel as a translucent overlay."""
        layer = (
            snapshot.smell_human if kind is ScentType.HUMAN else snapshot.smell_zombie
        )
        max_val = layer.max()
        if max_val <= 0:
            return
        intensity = layer.astype(np.float64) / max_val
        image = (intensity[..., None] * _SCENT_COLOURS[kind]).astype(np.uint8)
        overlay = self._blit_image(image)
        overlay.set_alpha(140)
        self.screen.blit(overlay, (0, 0))

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self._grid_w * self.cell_size + 10
        y = 10
        census = self.engine.census()
        overlay = self.overlay.name.lower() if self.overlay is not None else "off"

        lines = [
            f"Tick: {self.engine.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            f"Scent: {overlay}",
            "",
            "--- Census ---",
            f"Humans: {census.humans}",
            f"  cells: {census.human_cells}",
            f"Zombies: {census.zombies}",
            f"  cells: {census.zombie_cells}",
            f"Empty: {census.empty_cells}",
            "",
            "--- Controls ---",
            "SPACE: pause",
            "S: scent overlay",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
