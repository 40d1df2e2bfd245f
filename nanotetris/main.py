"""Command that runs the game."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence

import pygame

from nanotetris.engine import Engine, EngineFlag
from nanotetris.event import poll_events
from nanotetris.menu_scene import MenuScene
from nanotetris.scene import DrawState

FRAME_TIME = timedelta(milliseconds=16)
FRAMES_PER_SECOND = 60


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="nanotetris", description="Play tetris.")
    parser.add_argument(
        "--assets",
        type=Path,
        default=Engine.assets_path(),
        help="directory holding sounds, images and fonts",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the window, show the menu and run the frame loop until quit."""
    args = _parse_args(argv)
    engine = Engine.instance()
    try:
        try:
            engine.initialize(EngineFlag.ALL)
        except RuntimeError as exc:
            print(f"Fail while initialization of engine: {exc}", file=sys.stderr)
            return 1
        pygame.font.init()

        menu = MenuScene(engine.window.size.x, args.assets)
        engine.scenarist.push(menu)

        clock = pygame.time.Clock()
        engine.start()
        while engine.running:
            for event in poll_events():
                engine.dispatch(event)

            engine.new_frame()

            top = engine.scenarist.top()
            if top is not None:
                top.process(FRAME_TIME)
            top = engine.scenarist.top()
            if top is not None:
                top.draw(DrawState(program=engine.surface))

            engine.render()
            clock.tick(FRAMES_PER_SECOND)
        return 0
    finally:
        engine.shutdown()


if __name__ == "__main__":
    sys.exit(main())