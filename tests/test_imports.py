# tests/test_imports.py
def test_imports():
    import geoestimpy
    from geoestimpy import (
        distances, index, estimators
    )

    assert hasattr(geoestimpy, "__version__")
    assert callable(index.SpatialIndex.build)
    assert callable(distances.get_distance)
    assert set(estimators.SUPPORTED_ESTIMATORS) == {"idw", "lwr"}
