from tickengine.system import System


class FrameCounter(System):
    def __init__(self, start=0):
        self.count = start

    def update(self, step):
        self.count += step


class Named(System):
    @classmethod
    def debug_name(cls):
        return "custom"


def _create(cls, *args):
    return System.create.__func__(cls, *args)


def test_default_debug_name_is_snake_case():
    assert System.debug_name.__func__(FrameCounter) == "frame_counter"
    assert System.debug_name() == "system"


def test_overridden_debug_name():
    assert Named.debug_name() == "custom"
    assert System.debug_name.__func__(Named) == "named"


def test_create_passes_dependencies_to_constructor():
    counter = System.create.__func__(FrameCounter, 5)
    assert counter.count == 5


def test_create_without_dependencies():
    counter = System.create.__func__(FrameCounter)
    assert counter.count == 0


def test_overridden_update_runs():
    counter = System.create.__func__(FrameCounter, 1)
    counter.update(2)
    counter.update(3)
    assert counter.count == 6


def test_default_hooks_leave_state_unchanged():
    counter = System.create.__func__(FrameCounter, 7)
    assert System.setup(counter, "deps") is None
    assert System.teardown(counter, "deps") is None
    assert System.destroy(counter, "deps") is None
    assert counter.count == 7


def test_base_update_accepts_any_dependencies():
    named = System.create.__func__(Named)
    assert System.update(named, 1, 2, 3) is None
    assert vars(named) == {}