# nanotetris

A falling-blocks puzzle game built with pygame on a small 2D engine: a scene
stack, an event dispatcher, 3x3 transforms, textured sprites, WAV playback
and PPM image reading and writing.

## Installing

```
pip install .
```

The tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Playing

```
nanotetris
nanotetris --assets path/to/assets
```

`--assets` names the directory holding the block images (`cyan-block.png`,
`blue-block.png`, `orange-block.png`, `yellow-block.png`, `green-block.png`,
`purple-block.png`, `red-block.png`), the sounds (`piano-moment.wav`,
`8bit-music.wav`, `death.wav`, `tetramino-collision.wav`) and the fonts
(`JetBrainsMonoNerdFont-Bold.ttf`, `JetBrainsMonoNerdFont-Light.ttf`). It
defaults to `./assets`. Files that cannot be loaded are skipped: sounds stay
silent, fonts fall back to pygame's default font, and pieces without their
block image are not drawn.

The window is 90% of the desktop height tall and half as wide. The game
starts on a menu with a demo animation; click or tap **Start** to begin a
round. Closing the window quits.

Controls during a round:

| Input            | Action                                  |
|------------------|-----------------------------------------|
| `a` / `d`        | move the falling piece left / right     |
| `h` / `l`        | rotate counter-clockwise / clockwise    |
| `j`              | make the piece drop on the next frame   |
| swipe sideways   | move the piece                          |
| swipe down       | speed the piece up                      |
| tap              | rotate the piece clockwise              |

The field is 10 cells wide and 20 rows are visible. Every drop of the piece
scores 1 point and every cleared row scores 45. The drop delay starts at one
second and shrinks by 25 ms per cleared row while it is above 100 ms. The
round ends when a locked piece rises above the visible field; the game then
goes back to the menu.

## What it does not do

There is no high-score table or any other saved state, no pause key, no
settings screen, and no preview of the next piece.

## Using the engine pieces

The modules can be used on their own:

```python
from nanotetris.canvas import Canvas
from nanotetris.color import Color
from nanotetris import ppm

image = Canvas(2, 2, Color(255, 0, 0))
with open("red.ppm", "wb") as out:
    ppm.dump(out, image, ppm.PpmFormat.P6)

with open("red.ppm", "rb") as src:
    assert ppm.load(src) == image
```

`ppm.load` raises a `PpmError` subclass (`BadStreamError`,
`IncorrectFormatError`, `LimitsViolationError`, `IncorrectHeaderError`) for
input it cannot read.

```python
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2

t = Transform2D().move(Vec2(1.0, 2.0))
print(t.apply(Vec2(0.0, 0.0)))
```

- `nanotetris.event` turns pygame events into `Event` objects
  (`from_pygame_event`, `poll_events`).
- `nanotetris.postman.Postman` routes events: subscribe a handler under a
  `SubscriptionKey` built from an `Event` and a scene id, then `deliver`
  events for a scene. `Engine.dispatch` delivers to the scene on top of the
  engine's `SceneController`.
- `nanotetris.audio` reads 16-bit integer and 32-bit float WAV files with
  one or two channels (`load_wav`) and plays them with `Sound`, which hands
  samples to an output device through `Sound.fill`.
- `nanotetris.graphics` has `Texture2D`, `Shape` and `Sprite`, drawn onto a
  pygame surface passed as `DrawState.program`.