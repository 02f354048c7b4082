# chainscape

A small top-down arcade game played with the mouse or touch, drawn with
pygame.

You start in the middle of a large circular arena full of sleeping enemies.
Click with the left mouse button (or tap) anywhere to turn and run in that
direction. Sleeping enemies start to wake up when you come close, and an
awake enemy wakes the sleepers near it; awake enemies hunt you down.
Touching an awake enemy ends the run. Running into an enemy that is not yet
awake kills it and earns 5 points.

Power-ups lie scattered around the arena:

- **Speed** doubles your speed until your next turn.
- **Explosion** goes off around you two seconds after you pick it up and
  kills every enemy within a radius of 200 to 300 units (15 points for an
  awake enemy, 5 for any other).
- **Coin** adds a bonus of 30, 40, 50 or 60 points.

Three safe zones lie in the arena; arrows around your character point
towards them and grow more opaque as you get closer. Reaching one ends the
run with a win and a bonus of 100 points. Every whole second you survive is
worth a point as well.

When a run ends, the score is posted to the highscore server and the best
twenty entries are shown. Any click or tap closes the list and starts a new
round.

## Installing

```
pip install .
```

## Playing

```
chainscape
```

Options:

- `--assets DIR` – directory that holds the `images/` folder (default:
  `assets`). The images expected there are `player.png`, `enemy.png`,
  `speed.png`, `explosion.png`, `coin.png`, `noise.png`, `circle.png`,
  `square.png`, `safezone.png` and `arrow.png`. If the directory does not
  exist, every sprite is drawn as a plain coloured circle instead.
- `--frames N` – stop after `N` frames.
- `--seed N` – seed for the random layout of the arena (default: 1).

### Highscores

The score is posted, together with a player name, to the address in the
`CHAINSCAPE_HIGHSCORE_URL` environment variable; without it a placeholder
address is used and reporting fails. A failed report is logged and an
empty list is shown. The player name is the `USER` environment variable,
or `Test` if it is unset or blank.

## Using the game logic without a window

The rules live in `chainscape.world.World`, which needs no display:

```python
from chainscape.core import Vec2
from chainscape.rand import Rand
from chainscape.world import World

world = World(rand=Rand(7), enemy_count=200, powerup_count=10)
world.reset()
world.click(Vec2(100.0, 0.0))
for _ in range(60):
    world.update(1 / 60)
print(world.player.score(world.now), world.player.kill_count)
```

Without a `HighscoreClient`, ending a run shows the (empty) table straight
away and nothing is sent anywhere.

## What it does not do

- There is no sound.
- Movement and collisions use simple built-in circle checks rather than a
  full physics engine.
- There is no highscore server here; only a client that posts to one.

## Running the tests

```
pip install .[test]
pytest
```