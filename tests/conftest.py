pytest_plugins = ["busfactor.testing.conftest"]
