import gc
from pathlib import Path

from nanotetris.engine import Engine, EngineFlag, Window
from nanotetris.event import Event, EventType
from nanotetris.postman import SubscriptionKey
from nanotetris.scene import Node
from nanotetris.vec import Vec2


class DummyScene(Node):
    def __init__(self):
        super().__init__()
        self.log = []

    def start(self):
        self.log.append("start")

    def stop(self):
        self.log.append("stop")

    def pause(self):
        self.log.append("pause")

    def resume(self):
        self.log.append("resume")

    def process(self, delta):
        self.log.append("process")

    def draw(self, state):
        self.log.append("draw")


def test_flag_values():
    assert EngineFlag(0x20) is EngineFlag.VIDEO
    assert EngineFlag(0x10) is EngineFlag.AUDIO
    assert EngineFlag(0x4000) is EngineFlag.EVENTS
    assert EngineFlag(0x4030) == EngineFlag.ALL
    engine = Engine()
    engine.initialize(EngineFlag.AUDIO | EngineFlag.EVENTS)
    assert engine.flags == 0x4010


def test_window_defaults():
    window = Window()
    assert window.size == Vec2(450, 900)
    assert window.ratio == 450 / 900


def test_window_ratio_kept_after_resize():
    window = Window()
    window.size = Vec2(100, 100)
    assert window.ratio == 450 / 900


def test_instance_is_shared():
    first = Engine.instance()
    second = Engine.instance()
    assert first is second


def test_instance_recreated_after_release():
    engine = Engine.instance()
    engine.start()
    assert engine.running
    del engine
    gc.collect()
    assert Engine.instance().running is False


def test_assets_path():
    assert Engine.assets_path() == Path("./assets")


def test_start_stop():
    engine = Engine.instance()
    engine.start()
    assert engine.running is True
    engine.stop()
    assert engine.running is False


def test_initialize_without_video_opens_no_window():
    engine = Engine.instance()
    engine.initialize(EngineFlag.EVENTS)
    engine.new_frame()
    engine.render()
    assert engine.flags == EngineFlag.EVENTS
    assert engine.surface is None
    assert engine.frame_count == 0


def test_dispatch_reaches_active_scene_handler():
    engine = Engine.instance()
    scene = DummyScene()
    engine.scenarist.push(scene)
    received = []
    quit_event = Event(type=EventType.QUIT)
    engine.supplier.subscribe(SubscriptionKey(quit_event, scene.id), received.append)
    assert engine.dispatch(quit_event) is True
    assert received == [quit_event]


def test_dispatch_without_scene_delivers_nothing():
    engine = Engine()
    assert engine.dispatch(Event(type=EventType.QUIT)) is False


def test_dispatch_ignores_other_scenes():
    engine = Engine()
    first = DummyScene()
    second = DummyScene()
    engine.scenarist.push(first)
    engine.supplier.subscribe(
        SubscriptionKey(Event(type=EventType.QUIT), first.id), lambda ev: None
    )
    engine.scenarist.push(second)
    assert engine.dispatch(Event(type=EventType.QUIT)) is False
    assert first.log == ["start", "pause"]