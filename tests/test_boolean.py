import pytest

from spatialgen.geom import point
from spatialgen.geom3d import boxsolid
from spatialgen.boolean import (
    DEFAULT_ENGINE,
    available_engines,
    boolean_split,
    get_engine,
    register_engine,
    unregister_engine,
)


class _Recorder:
    def __init__(self):
        self.calls = []

    def split_solid(self, a, b, tol, backend=None):
        self.calls.append((tol, backend))
        return ['fragment']


@pytest.fixture
def recorder():
    engine = _Recorder()
    register_engine('Recorder', engine)
    yield engine
    unregister_engine('recorder')


def _boxes():
    return (boxsolid([point(0, 0, 0), point(1, 1, 1)]),
            boxsolid([point(0.5, 0, 0), point(2, 1, 1)]))


def test_default_engine_registered():
    assert DEFAULT_ENGINE in available_engines()
    assert get_engine('TRIMESH') is get_engine('trimesh')


def test_register_requires_split_solid():
    with pytest.raises(TypeError):
        register_engine('broken', object())
    assert 'broken' not in available_engines()


def test_explicit_engine(recorder):
    a, b = _boxes()
    assert boolean_split(a, b, 0.01, engine='recorder') == ['fragment']
    assert recorder.calls == [(0.01, None)]


def test_engine_backend_suffix(recorder):
    a, b = _boxes()
    boolean_split(a, b, 0.01, engine='recorder:fast')
    assert recorder.calls == [(0.01, 'fast')]


def test_engine_from_environment(recorder, monkeypatch):
    monkeypatch.setenv('SPATIALGEN_BOOLEAN_ENGINE', 'recorder:exact')
    a, b = _boxes()
    boolean_split(a, b, 0.5)
    assert recorder.calls == [(0.5, 'exact')]


def test_unknown_engine():
    a, b = _boxes()
    with pytest.raises(ValueError):
        boolean_split(a, b, 0.01, engine='missing')
