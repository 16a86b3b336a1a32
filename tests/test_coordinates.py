"""Tests for CoordinateSpace pointer -> model conversion."""

from mindmap.edit import CoordinateSpace, HALF_EXTENT


def test_to_model_subtracts_origin_and_half_footprint():
    space = CoordinateSpace()
    assert space.to_model((300, 300), (10, 20)) == (250, 240)


def test_center_of_footprint():
    space = CoordinateSpace()
    assert space.center_of((200, 200)) == (200 + HALF_EXTENT, 200 + HALF_EXTENT)


def test_custom_half_extent():
    space = CoordinateSpace(half_extent=10)
    assert space.to_model((100, 100), (0, 0)) == (90, 90)


class TestResolve:
    """resolve() asks the host for the container origin every time."""

    def test_without_provider_returns_none(self):
        assert CoordinateSpace().resolve((100, 100)) is None

    def test_provider_returning_none(self):
        space = CoordinateSpace(lambda: None)
        assert space.resolve((100, 100)) is None

    def test_uses_latest_origin(self):
        origin = [(0, 0)]
        space = CoordinateSpace(lambda: origin[0])
        assert space.resolve((100, 100)) == (60.0, 60.0)
        origin[0] = (50, 50)
        assert space.resolve((100, 100)) == (10.0, 10.0)

    def test_set_origin_provider(self):
        space = CoordinateSpace()
        space.set_origin_provider(lambda: [5, 5])
        assert space.current_origin() == (5.0, 5.0)
        assert space.resolve((45, 45)) == (0.0, 0.0)
