import itertools
import random

from block_stacker.game import Action, GameLoop, GameSettings, ScriptedInput, StackingGame


def ticking_clock(step: float = 1.0 / 60.0):
    counter = itertools.count()
    return lambda: next(counter) * step


def make_loop(listener, source=None, **kwargs):
    game = StackingGame(GameSettings(), rng=random.Random(9), listener=listener)
    return GameLoop(game, source or ScriptedInput(), clock=ticking_clock(), **kwargs)


def test_quit_event_stops_loop(listener):
    source = ScriptedInput()
    loop = make_loop(listener, source)
    loop.start()
    assert loop.step()
    source.push(Action.QUIT, Action.MOVE_LEFT)
    assert not loop.step()
    assert not loop.game.running


def test_run_returns_after_quit(listener):
    source = ScriptedInput([Action.HARD_DROP, Action.QUIT])
    loop = make_loop(listener, source)
    assert loop.run() == loop.game.score
    assert len(listener.named("locked")) == 1
    assert loop.iterations == 0


def test_timers_run_without_any_input(listener):
    loop = make_loop(listener)
    loop.run(max_iterations=60 * 25)
    assert listener.named("locked")


def test_soft_drop_is_sampled_each_iteration(listener):
    source = ScriptedInput()
    source.soft_drop = True
    loop = make_loop(listener, source)
    loop.start()
    for _ in range(30):
        loop.step()
    # half a second at 10 tiles per second
    assert loop.game.piece.row >= 4


def test_on_frame_receives_snapshots(listener):
    frames = []
    loop = make_loop(listener, on_frame=frames.append)
    loop.run(max_iterations=3)
    assert len(frames) == 3
    assert all(frame.running for frame in frames)


def test_gravity_keeps_running_under_constant_input(listener):
    source = ScriptedInput()
    loop = make_loop(listener, source)
    loop.start()
    for i in range(126):
        source.push(Action.MOVE_LEFT if i % 2 == 0 else Action.MOVE_RIGHT)
        loop.step()
    # 2.1 seconds at 1 tile per second, every frame carrying a move
    assert loop.game.piece.row == 2
    assert not listener.named("locked")
